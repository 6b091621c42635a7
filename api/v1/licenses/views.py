"""
License API views for signed-in users and the client add-on.
"""

import uuid

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response

from api.v1 import providers
from api.v1.licenses.serializers import (
    ActivateLicenseRequestSerializer,
    ActivationResultSerializer,
    BindHwidRequestSerializer,
    CheckLicenseRequestSerializer,
    LicenseCheckSerializer,
    LicenseSerializer,
)
from api.views import GuardedAPIView
from core.instrumentation import get_tracer, mark_failed, mark_ok
from licenses.application.commands.activate_license import ActivateLicenseCommand, BindHwidCommand
from licenses.application.queries.check_license import CheckLicenseQuery
from licenses.application.queries.list_licenses import ListOwnLicensesQuery

tracer = get_tracer(__name__)


class OwnLicensesView(GuardedAPIView):
    """View listing the signed-in user's licenses."""

    @extend_schema(
        operation_id="list_own_licenses",
        summary="My licenses",
        tags=["Licenses"],
        responses={200: LicenseSerializer(many=True), 401: {"description": "Unauthenticated"}},
    )
    def get(self, request: Request) -> Response:
        licenses = async_to_sync(providers.list_own_licenses_handler().handle)(
            ListOwnLicensesQuery(user_id=self.user.id)
        )
        return Response(LicenseSerializer(licenses, many=True).data)


class ActivateLicenseView(GuardedAPIView):
    """View for claiming a license by key."""

    @extend_schema(
        operation_id="activate_license",
        summary="Activate license",
        description=(
            "Bind an unclaimed license to the signed-in user. Activating a key the "
            "user already owns succeeds without changes."
        ),
        tags=["Licenses"],
        request=ActivateLicenseRequestSerializer,
        responses={
            200: ActivationResultSerializer,
            404: {"description": "License not found"},
            409: {"description": "Owned by another user, or deactivated"},
        },
    )
    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_activate)(request)

    async def _handle_activate(self, request: Request) -> Response:
        with tracer.start_as_current_span("activate_license") as span:
            span.set_attribute("user.id", str(self.user.id))

            serializer = ActivateLicenseRequestSerializer(data=request.data)
            if not serializer.is_valid():
                mark_failed(span, "validation_failed")
                return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

            result = await providers.activate_license_handler().handle(
                ActivateLicenseCommand(
                    user_id=self.user.id,
                    license_key=serializer.validated_data["license_key"],
                )
            )
            span.set_attribute("license.id", str(result.license.id))
            span.set_attribute("already_owned", result.already_owned)
            mark_ok(span)
            return Response(ActivationResultSerializer(result).data)


class BindHwidView(GuardedAPIView):
    """View for binding a hardware id to an owned license."""

    @extend_schema(
        operation_id="bind_hwid",
        summary="Bind HWID",
        description="Overwrite the HWID of a license you own. An empty value clears it.",
        tags=["Licenses"],
        request=BindHwidRequestSerializer,
        responses={200: LicenseSerializer, 404: {"description": "License not found"}},
    )
    def put(self, request: Request, license_id: uuid.UUID) -> Response:
        serializer = BindHwidRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        license = async_to_sync(providers.bind_hwid_handler().handle)(
            BindHwidCommand(
                user_id=self.user.id,
                license_id=license_id,
                hwid=serializer.validated_data["hwid"],
            )
        )
        return Response(LicenseSerializer(license).data)


class CheckLicenseView(GuardedAPIView):
    """View the client add-on calls to validate a key."""

    require_auth = False

    @extend_schema(
        operation_id="check_license",
        summary="Check license",
        tags=["Licenses"],
        request=CheckLicenseRequestSerializer,
        responses={200: LicenseCheckSerializer, 404: {"description": "License not found"}},
    )
    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_check)(request)

    async def _handle_check(self, request: Request) -> Response:
        with tracer.start_as_current_span("check_license") as span:
            serializer = CheckLicenseRequestSerializer(data=request.data)
            if not serializer.is_valid():
                mark_failed(span, "validation_failed")
                return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

            data = serializer.validated_data
            result = await providers.check_license_handler().handle(
                CheckLicenseQuery(license_key=data["license_key"], hwid=data.get("hwid"))
            )
            span.set_attribute("license.valid", result.valid)
            span.set_attribute("license.status", result.status)
            mark_ok(span)
            return Response(LicenseCheckSerializer(result).data)
