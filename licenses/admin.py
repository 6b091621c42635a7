"""
Django admin configuration for licenses app.
"""
from django.contrib import admin
from django.utils import timezone
from django.utils.html import format_html

from licenses.infrastructure.models import License


@admin.register(License)
class LicenseAdmin(admin.ModelAdmin):
    """Admin interface for License model."""

    list_display = [
        "license_key",
        "product",
        "owner",
        "duration_type",
        "status_display",
        "hwid",
        "expires_at",
        "created_at",
    ]
    list_filter = ["is_active", "duration_type", "product", "created_at"]
    search_fields = ["license_key", "owner__email", "product__name", "hwid"]
    readonly_fields = ["id", "created_at", "activated_at"]
    raw_id_fields = ["owner", "issued_by"]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "license_key", "product", "duration_type", "is_active"),
            },
        ),
        (
            "Ownership",
            {
                "fields": ("owner", "issued_by", "hwid", "activated_at"),
            },
        ),
        (
            "Expiration",
            {
                "fields": ("expires_at",),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at",),
                "classes": ("collapse",),
            },
        ),
    )

    def status_display(self, obj):
        """Display status with color coding."""
        if not obj.is_active:
            color, label = "red", "DEACTIVATED"
        elif obj.duration_type == "lifetime" or obj.expires_at is None:
            color, label = "green", "LIFETIME"
        elif obj.expires_at <= timezone.now():
            color, label = "gray", "EXPIRED"
        else:
            color, label = "green", "ACTIVE"
        return format_html('<span style="color: {}; font-weight: bold;">{}</span>', color, label)

    status_display.short_description = "Status"

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("owner", "product")
