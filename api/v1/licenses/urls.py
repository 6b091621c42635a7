"""
URL configuration for license API endpoints.
"""

from django.urls import path

from api.v1.licenses import views

urlpatterns = [
    path("licenses", views.OwnLicensesView.as_view(), name="own-licenses"),
    path("licenses/activate", views.ActivateLicenseView.as_view(), name="activate-license"),
    path("licenses/check", views.CheckLicenseView.as_view(), name="check-license"),
    path("licenses/<uuid:license_id>/hwid", views.BindHwidView.as_view(), name="bind-hwid"),
]
