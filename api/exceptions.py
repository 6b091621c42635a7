"""
API exception handlers.

Domain exceptions are mapped to stable HTTP statuses and an
``{"error": {"code", "message"[, "field"]}}`` body.
"""

import logging
from typing import Any, Dict, Optional

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import (
    AlreadyConfirmedError,
    AlreadyOwnedByOtherError,
    DomainException,
    DuplicateEmailError,
    EmailNotConfirmedError,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidFieldError,
    LicenseDeactivatedError,
    LicenseKeyCollisionError,
    NotFoundError,
    ServiceUnavailableError,
    UnauthenticatedError,
)
from core.metrics import errors_total

logger = logging.getLogger(__name__)

# Checked in order; the first matching class wins.
STATUS_BY_EXCEPTION = (
    ((InvalidCredentialsError, UnauthenticatedError), status.HTTP_401_UNAUTHORIZED),
    ((ForbiddenError, EmailNotConfirmedError), status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (
        (DuplicateEmailError, AlreadyOwnedByOtherError, LicenseDeactivatedError, AlreadyConfirmedError),
        status.HTTP_409_CONFLICT,
    ),
    ((ServiceUnavailableError, LicenseKeyCollisionError), status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_for(exc: DomainException) -> int:
    """Return the HTTP status for a domain exception."""
    for exception_types, status_code in STATUS_BY_EXCEPTION:
        if isinstance(exc, exception_types):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    trace_id = _get_trace_id(context)

    if isinstance(exc, DomainException):
        response = _handle_domain_exception(exc, context, trace_id)
    elif isinstance(exc, APIException):
        response = exception_handler(exc, context)
        code = exc.default_code.upper().replace("-", "_")
        detail = response.data.get("detail", exc.default_detail) if isinstance(response.data, dict) else response.data
        response.data = {"error": {"code": code, "message": detail}}
    elif isinstance(exc, Http404):
        response = Response(
            {"error": {"code": "NOT_FOUND", "message": "Resource not found"}},
            status=status.HTTP_404_NOT_FOUND,
        )
    else:
        return _handle_unexpected_exception(exc, context, trace_id)

    if trace_id:
        response["X-Trace-ID"] = trace_id
    return response


def _get_trace_id(context: Dict[str, Any]) -> Optional[str]:
    """Extract trace ID from request context."""
    request = context.get("request")
    if not request:
        return None
    return getattr(request, "correlation_id", None)


def _endpoint(context: Dict[str, Any]) -> str:
    view = context.get("view")
    return type(view).__name__ if view is not None else "unknown"


def _handle_domain_exception(
    exc: DomainException, context: Dict[str, Any], trace_id: Optional[str]
) -> Response:
    """Handle domain-specific exceptions."""
    status_code = status_for(exc)
    body = {"code": exc.code, "message": exc.message}
    if isinstance(exc, InvalidFieldError):
        body["field"] = exc.field

    errors_total.labels(error_type=exc.code, endpoint=_endpoint(context)).inc()
    if status_code >= 500:
        logger.error("Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id})
    else:
        logger.warning("Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id})

    response = Response({"error": body}, status=status_code)
    if status_code == status.HTTP_401_UNAUTHORIZED:
        response["WWW-Authenticate"] = "Bearer"
    return response


def _handle_unexpected_exception(
    exc: Exception, context: Dict[str, Any], trace_id: Optional[str]
) -> Response:
    """Handle unexpected or untracked exceptions."""
    logger.error("Unexpected error: %s", exc, extra={"trace_id": trace_id}, exc_info=True)
    errors_total.labels(error_type="INTERNAL_ERROR", endpoint=_endpoint(context)).inc()
    response = Response(
        {"error": {"code": "INTERNAL_ERROR", "message": "An internal error occurred"}},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    if trace_id:
        response["X-Trace-ID"] = trace_id
    return response
