"""
Serializers for license API endpoints.
"""

from rest_framework import serializers


class ActivateLicenseRequestSerializer(serializers.Serializer):
    """Serializer for license activation request."""

    license_key = serializers.CharField(max_length=64, trim_whitespace=True)


class BindHwidRequestSerializer(serializers.Serializer):
    """Serializer for HWID binding; an empty value clears the binding."""

    hwid = serializers.CharField(max_length=255, allow_blank=True, allow_null=True)


class CheckLicenseRequestSerializer(serializers.Serializer):
    """Serializer for client add-on license check."""

    license_key = serializers.CharField(max_length=64)
    hwid = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)


class LicenseSerializer(serializers.Serializer):
    """Serializer for LicenseDTO."""

    id = serializers.UUIDField()
    license_key = serializers.CharField()
    product_id = serializers.UUIDField(allow_null=True)
    owner_id = serializers.UUIDField(allow_null=True)
    issued_by = serializers.UUIDField(allow_null=True)
    is_active = serializers.BooleanField()
    duration_type = serializers.CharField(allow_null=True)
    hwid = serializers.CharField(allow_null=True)
    created_at = serializers.DateTimeField()
    activated_at = serializers.DateTimeField(allow_null=True)
    expires_at = serializers.DateTimeField(allow_null=True)
    status = serializers.CharField()
    is_expired = serializers.BooleanField()
    is_lifetime = serializers.BooleanField()
    remaining_seconds = serializers.IntegerField(allow_null=True)
    product_name = serializers.CharField(allow_null=True)
    product_slug = serializers.CharField(allow_null=True)
    product_is_beta = serializers.BooleanField(allow_null=True)
    owner_email = serializers.CharField(allow_null=True)
    owner_display_name = serializers.CharField(allow_null=True)


class ActivationResultSerializer(serializers.Serializer):
    """Serializer for ActivationResultDTO."""

    message = serializers.CharField()
    already_owned = serializers.BooleanField()
    license = LicenseSerializer()


class LicenseCheckSerializer(serializers.Serializer):
    """Serializer for LicenseCheckDTO."""

    license_key = serializers.CharField()
    valid = serializers.BooleanField()
    status = serializers.CharField()
    is_expired = serializers.BooleanField()
    is_lifetime = serializers.BooleanField()
    expires_at = serializers.DateTimeField(allow_null=True)
    remaining_seconds = serializers.IntegerField(allow_null=True)
    is_claimed = serializers.BooleanField()
    hwid_bound = serializers.BooleanField()
    hwid_match = serializers.BooleanField(allow_null=True)
