"""
Request logging middleware.

Every request gets a correlation id (taken from ``X-Correlation-ID`` or
generated), one structured log line when it completes, and the id echoed
back in the response headers together with the active trace id.
"""

import logging
import time
import uuid
from typing import Callable, Dict, Optional

from django.http import HttpRequest, HttpResponse
from opentelemetry import trace
from opentelemetry.trace import format_trace_id

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"

# Polled by load balancers and Prometheus; logged at DEBUG only.
QUIET_PATHS = frozenset({"/health/", "/health/db/", "/ready/", "/metrics"})


def _client_address(request: HttpRequest) -> Optional[str]:
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")


def _trace_id() -> Optional[str]:
    context = trace.get_current_span().get_span_context()
    return format_trace_id(context.trace_id) if context.is_valid else None


class ObservabilityMiddleware:
    """Correlation ids and one access log record per request."""

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        correlation_id = request.headers.get(CORRELATION_HEADER) or uuid.uuid4().hex
        request.correlation_id = correlation_id  # type: ignore[attr-defined]
        started = time.perf_counter()

        try:
            response = self.get_response(request)
        except Exception:
            logger.exception(
                "Unhandled error for %s %s",
                request.method,
                request.path,
                extra=self._context(request, correlation_id, started),
            )
            raise

        context = self._context(request, correlation_id, started)
        context["status_code"] = response.status_code
        self._log(request, response.status_code, context)

        response[CORRELATION_HEADER] = correlation_id
        if context.get("trace_id"):
            response["X-Trace-ID"] = context["trace_id"]
        return response

    @staticmethod
    def _context(request: HttpRequest, correlation_id: str, started: float) -> Dict[str, object]:
        match = getattr(request, "resolver_match", None)
        context: Dict[str, object] = {
            "correlation_id": correlation_id,
            "method": request.method,
            "path": request.path,
            "route": match.view_name if match else None,
            "client": _client_address(request),
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
        }
        trace_id = _trace_id()
        if trace_id:
            context["trace_id"] = trace_id
        return context

    @staticmethod
    def _log(request: HttpRequest, status_code: int, context: Dict[str, object]) -> None:
        if request.path in QUIET_PATHS:
            level = logging.DEBUG
        elif status_code >= 500:
            level = logging.ERROR
        elif status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        logger.log(level, "%s %s -> %s", request.method, request.path, status_code, extra=context)
