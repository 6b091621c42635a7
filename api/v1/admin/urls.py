"""
URL configuration for administrative endpoints.
"""

from django.urls import path

from api.v1.admin import views

urlpatterns = [
    path("users", views.AdminUsersView.as_view(), name="admin-users"),
    path("licenses", views.AdminLicensesView.as_view(), name="admin-licenses"),
    path(
        "licenses/<uuid:license_id>",
        views.AdminLicenseDetailView.as_view(),
        name="admin-license-detail",
    ),
    path(
        "licenses/<uuid:license_id>/deactivate",
        views.AdminDeactivateLicenseView.as_view(),
        name="admin-deactivate-license",
    ),
    path(
        "licenses/<uuid:license_id>/release",
        views.AdminReleaseLicenseView.as_view(),
        name="admin-release-license",
    ),
    path("products", views.AdminProductsView.as_view(), name="admin-products"),
    path("stats", views.AdminStatsView.as_view(), name="admin-stats"),
]
