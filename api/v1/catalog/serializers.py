"""
Serializers for catalog and purchase endpoints.
"""

from rest_framework import serializers

PAYMENT_METHODS = ["sbp", "ru_card"]


class PricingTierSerializer(serializers.Serializer):
    """Serializer for PricingTierDTO."""

    id = serializers.UUIDField()
    product_id = serializers.UUIDField()
    duration_type = serializers.CharField()
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    duration_days = serializers.IntegerField(allow_null=True)


class ProductSerializer(serializers.Serializer):
    """Serializer for ProductDTO."""

    id = serializers.UUIDField()
    slug = serializers.CharField()
    name = serializers.CharField()
    is_beta = serializers.BooleanField()
    features = serializers.ListField(child=serializers.CharField())
    created_at = serializers.DateTimeField(allow_null=True)
    pricing_tiers = PricingTierSerializer(many=True)


class PurchaseSerializer(serializers.Serializer):
    """Serializer for PurchaseDTO."""

    id = serializers.UUIDField()
    license_id = serializers.UUIDField(allow_null=True)
    license_key = serializers.CharField(allow_null=True)
    product_name = serializers.CharField(allow_null=True)
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    status = serializers.CharField()
    created_at = serializers.DateTimeField()


class PreviewPurchaseRequestSerializer(serializers.Serializer):
    """Serializer for purchase preview request."""

    product_id = serializers.UUIDField(required=False, allow_null=True)
    pricing_tier_id = serializers.UUIDField()
    payment_method = serializers.ChoiceField(choices=PAYMENT_METHODS)


class PurchasePreviewSerializer(serializers.Serializer):
    """Serializer for PurchasePreviewDTO."""

    message = serializers.CharField()
    product_id = serializers.UUIDField()
    pricing_tier_id = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    payment_method = serializers.CharField()
    redirect_url = serializers.CharField()
