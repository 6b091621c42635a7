"""
Django admin configuration for products app.
"""

from django.contrib import admin

from products.infrastructure.models import PricingTier, Product, Purchase


class PricingTierInline(admin.TabularInline):
    """Inline pricing tiers on the product page."""

    model = PricingTier
    extra = 0
    fields = ["duration_type", "price", "duration_days"]


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Admin interface for Product model."""

    list_display = ["name", "slug", "is_beta", "license_count", "created_at"]
    list_filter = ["is_beta", "created_at"]
    search_fields = ["name", "slug"]
    readonly_fields = ["id", "created_at", "updated_at"]
    prepopulated_fields = {"slug": ("name",)}
    inlines = [PricingTierInline]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "name", "slug", "is_beta", "features"),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )

    def license_count(self, obj):
        """Display number of licenses for this product."""
        return obj.licenses.count()

    license_count.short_description = "Licenses"

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).prefetch_related("licenses", "pricing_tiers")


@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    """Admin interface for Purchase model."""

    list_display = ["user", "amount", "status", "license", "created_at"]
    list_filter = ["status", "created_at"]
    search_fields = ["user__email", "license__license_key"]
    readonly_fields = ["id", "created_at"]

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("user", "license")
