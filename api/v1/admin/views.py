"""
Administrative API views.

Every view here requires the admin role, checked against the store on
each request.
"""

import uuid

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response

from accounts.application.queries.list_users import ListUsersQuery
from api.v1 import providers
from api.v1.admin.serializers import (
    DashboardStatsSerializer,
    IssuedLicenseSerializer,
    IssueLicenseRequestSerializer,
    UpdateLicenseRequestSerializer,
)
from api.v1.auth.serializers import UserSerializer
from api.v1.catalog.serializers import ProductSerializer
from api.v1.licenses.serializers import LicenseSerializer
from api.views import GuardedAPIView
from core.domain.value_objects import DurationType
from core.instrumentation import get_tracer, mark_failed, mark_ok
from licenses.application.commands.admin_license_commands import (
    DeactivateLicenseCommand,
    DeleteLicenseCommand,
    ReleaseLicenseCommand,
    UpdateLicenseCommand,
)
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.queries.dashboard_stats import DashboardStatsQuery
from licenses.application.queries.list_licenses import ListAllLicensesQuery
from products.application.queries.catalog_queries import ListCatalogQuery

tracer = get_tracer(__name__)

ADMIN_RESPONSES = {
    401: {"description": "Unauthenticated"},
    403: {"description": "Administrator privileges required"},
}


def _duration_type(value):
    return DurationType(value) if value else None


class AdminAPIView(GuardedAPIView):
    require_admin = True


class AdminUsersView(AdminAPIView):
    """All accounts with profile and roles."""

    @extend_schema(
        operation_id="admin_list_users",
        summary="List users",
        tags=["Admin"],
        responses={200: UserSerializer(many=True), **ADMIN_RESPONSES},
    )
    def get(self, request: Request) -> Response:
        users = async_to_sync(providers.list_users_handler().handle)(ListUsersQuery())
        return Response(UserSerializer(users, many=True).data)


class AdminLicensesView(AdminAPIView):
    """List every license, or issue a new one."""

    @extend_schema(
        operation_id="admin_list_licenses",
        summary="List licenses",
        tags=["Admin"],
        responses={200: LicenseSerializer(many=True), **ADMIN_RESPONSES},
    )
    def get(self, request: Request) -> Response:
        licenses = async_to_sync(providers.list_all_licenses_handler().handle)(ListAllLicensesQuery())
        return Response(LicenseSerializer(licenses, many=True).data)

    @extend_schema(
        operation_id="admin_issue_license",
        summary="Issue license",
        description=(
            "Generate a license key. With an `owner_email` of a registered user the "
            "license is issued already activated for that user."
        ),
        tags=["Admin"],
        request=IssueLicenseRequestSerializer,
        responses={
            201: IssuedLicenseSerializer,
            404: {"description": "Product not found"},
            503: {"description": "Could not allocate a unique key"},
            **ADMIN_RESPONSES,
        },
    )
    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_issue)(request)

    async def _handle_issue(self, request: Request) -> Response:
        with tracer.start_as_current_span("issue_license") as span:
            span.set_attribute("admin.id", str(self.user.id))

            serializer = IssueLicenseRequestSerializer(data=request.data)
            if not serializer.is_valid():
                mark_failed(span, "validation_failed")
                return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

            data = serializer.validated_data
            result = await providers.issue_license_handler().handle(
                IssueLicenseCommand(
                    issued_by=self.user.id,
                    product_id=data.get("product_id"),
                    duration_type=_duration_type(data.get("duration_type")),
                    duration_days=data.get("duration_days"),
                    owner_email=data.get("owner_email") or None,
                    hwid=data.get("hwid") or None,
                )
            )
            span.set_attribute("license.id", str(result.id))
            mark_ok(span)
            return Response(IssuedLicenseSerializer(result).data, status=status.HTTP_201_CREATED)


class AdminLicenseDetailView(AdminAPIView):
    """Update or delete one license."""

    @extend_schema(
        operation_id="admin_update_license",
        summary="Update license",
        description="Sparse update: only the fields present in the body are written.",
        tags=["Admin"],
        request=UpdateLicenseRequestSerializer,
        responses={
            200: LicenseSerializer,
            400: {"description": "Empty patch or invalid field"},
            404: {"description": "License not found"},
            **ADMIN_RESPONSES,
        },
    )
    def patch(self, request: Request, license_id: uuid.UUID) -> Response:
        serializer = UpdateLicenseRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"error": serializer.errors}, status=status.HTTP_400_BAD_REQUEST)

        changes = dict(serializer.validated_data)
        if "duration_type" in changes:
            changes["duration_type"] = _duration_type(changes["duration_type"])
        # Unknown keys are passed through so the handler can reject them by name
        for key in request.data:
            if key not in serializer.fields:
                changes[key] = request.data[key]

        license = async_to_sync(providers.update_license_handler().handle)(
            UpdateLicenseCommand(license_id=license_id, changes=changes)
        )
        return Response(LicenseSerializer(license).data)

    @extend_schema(
        operation_id="admin_delete_license",
        summary="Delete license",
        tags=["Admin"],
        responses={204: None, 404: {"description": "License not found"}, **ADMIN_RESPONSES},
    )
    def delete(self, request: Request, license_id: uuid.UUID) -> Response:
        async_to_sync(providers.delete_license_handler().handle)(
            DeleteLicenseCommand(license_id=license_id)
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


class AdminDeactivateLicenseView(AdminAPIView):
    """Deactivate a license without touching owner or expiry."""

    @extend_schema(
        operation_id="admin_deactivate_license",
        summary="Deactivate license",
        tags=["Admin"],
        request=None,
        responses={200: LicenseSerializer, 404: {"description": "License not found"}, **ADMIN_RESPONSES},
    )
    def post(self, request: Request, license_id: uuid.UUID) -> Response:
        license = async_to_sync(providers.deactivate_license_handler().handle)(
            DeactivateLicenseCommand(license_id=license_id)
        )
        return Response(LicenseSerializer(license).data)


class AdminReleaseLicenseView(AdminAPIView):
    """Clear the owner so the key can be activated again."""

    @extend_schema(
        operation_id="admin_release_license",
        summary="Release license",
        tags=["Admin"],
        request=None,
        responses={200: LicenseSerializer, 404: {"description": "License not found"}, **ADMIN_RESPONSES},
    )
    def post(self, request: Request, license_id: uuid.UUID) -> Response:
        license = async_to_sync(providers.release_license_handler().handle)(
            ReleaseLicenseCommand(license_id=license_id)
        )
        return Response(LicenseSerializer(license).data)


class AdminProductsView(AdminAPIView):
    """Every product, beta products last."""

    @extend_schema(
        operation_id="admin_list_products",
        summary="List products",
        tags=["Admin"],
        responses={200: ProductSerializer(many=True), **ADMIN_RESPONSES},
    )
    def get(self, request: Request) -> Response:
        products = async_to_sync(providers.list_catalog_handler().handle)(
            ListCatalogQuery(beta_last=True)
        )
        return Response(ProductSerializer(products, many=True).data)


class AdminStatsView(AdminAPIView):
    """Dashboard counters."""

    @extend_schema(
        operation_id="admin_stats",
        summary="Dashboard stats",
        tags=["Admin"],
        responses={200: DashboardStatsSerializer, **ADMIN_RESPONSES},
    )
    def get(self, request: Request) -> Response:
        stats = async_to_sync(providers.dashboard_stats_handler().handle)(DashboardStatsQuery())
        return Response(DashboardStatsSerializer(stats).data)
