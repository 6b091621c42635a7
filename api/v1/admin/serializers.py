"""
Serializers for administrative endpoints.
"""

from rest_framework import serializers

from core.domain.value_objects import DurationType

DURATION_CHOICES = [d.value for d in DurationType]


class IssueLicenseRequestSerializer(serializers.Serializer):
    """Serializer for license issuance request."""

    product_id = serializers.UUIDField(required=False, allow_null=True)
    duration_type = serializers.ChoiceField(choices=DURATION_CHOICES, required=False, allow_null=True)
    duration_days = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    owner_email = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=254)
    hwid = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)


class UpdateLicenseRequestSerializer(serializers.Serializer):
    """
    Serializer for a sparse license update.

    Only fields present in the request body end up in ``validated_data``.
    """

    is_active = serializers.BooleanField(required=False)
    expires_at = serializers.DateTimeField(required=False, allow_null=True)
    hwid = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    product_id = serializers.UUIDField(required=False, allow_null=True)
    duration_type = serializers.ChoiceField(choices=DURATION_CHOICES, required=False, allow_null=True)


class IssuedLicenseSerializer(serializers.Serializer):
    """Serializer for IssuedLicenseDTO."""

    id = serializers.UUIDField()
    license_key = serializers.CharField()
    expires_at = serializers.DateTimeField(allow_null=True)
    owner_id = serializers.UUIDField(allow_null=True)


class DashboardStatsSerializer(serializers.Serializer):
    """Serializer for DashboardStatsDTO."""

    users = serializers.IntegerField()
    licenses = serializers.IntegerField()
    active_licenses = serializers.IntegerField()
    purchases = serializers.IntegerField()
    revenue = serializers.DecimalField(max_digits=12, decimal_places=2)
