"""
Serializers for the auth API endpoints.
"""

from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers


def _validate_new_password(value: str) -> str:
    try:
        validate_password(value)
    except DjangoValidationError as e:
        raise serializers.ValidationError(list(e.messages))
    return value


class RegisterRequestSerializer(serializers.Serializer):
    """Serializer for registration request."""

    email = serializers.EmailField(max_length=254)
    password = serializers.CharField(write_only=True, max_length=128)
    display_name = serializers.CharField(required=False, allow_blank=True, max_length=100)

    def validate_password(self, value):
        return _validate_new_password(value)


class TokenRequestSerializer(serializers.Serializer):
    """Serializer carrying an emailed confirmation token."""

    token = serializers.CharField(max_length=256)


class EmailRequestSerializer(serializers.Serializer):
    """Serializer for requests identified by email only."""

    email = serializers.CharField(max_length=254)


class LoginRequestSerializer(serializers.Serializer):
    """Serializer for login request."""

    email = serializers.CharField(max_length=254)
    password = serializers.CharField(write_only=True, max_length=128)


class ResetPasswordRequestSerializer(serializers.Serializer):
    """Serializer for password reset request."""

    token = serializers.CharField(max_length=256)
    new_password = serializers.CharField(write_only=True, max_length=128)

    def validate_new_password(self, value):
        return _validate_new_password(value)


class ChangePasswordRequestSerializer(serializers.Serializer):
    """Serializer for password change request."""

    current_password = serializers.CharField(write_only=True, max_length=128)
    new_password = serializers.CharField(write_only=True, max_length=128)

    def validate_new_password(self, value):
        return _validate_new_password(value)


class UserSerializer(serializers.Serializer):
    """Serializer for UserDTO."""

    id = serializers.UUIDField()
    email = serializers.EmailField()
    email_confirmed = serializers.BooleanField()
    display_name = serializers.CharField()
    avatar_url = serializers.CharField(allow_null=True)
    roles = serializers.ListField(child=serializers.CharField())
    created_at = serializers.DateTimeField()


class SessionSerializer(serializers.Serializer):
    """Serializer for SessionDTO."""

    user = UserSerializer()
    token = serializers.CharField()


class RegistrationResultSerializer(serializers.Serializer):
    """Serializer for RegistrationResultDTO."""

    user_id = serializers.UUIDField()
    email = serializers.EmailField()
    email_confirmed = serializers.BooleanField()
    message = serializers.CharField()


class MessageSerializer(serializers.Serializer):
    """Serializer for MessageDTO."""

    message = serializers.CharField()
