"""
User, Profile, UserRole and verification token models.
"""
import uuid

from django.db import models
from django.utils import timezone

from accounts.domain.user import DISPLAY_NAME_MAX_LENGTH
from core.domain.value_objects import Role


class User(models.Model):
    """
    An account of the store.

    Independent of ``django.contrib.auth``; the admin site keeps its own
    staff users.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(max_length=254, unique=True, help_text="Lower-cased email address")
    password_hash = models.CharField(max_length=255)
    email_confirmed = models.BooleanField(default=False, db_index=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "users"
        ordering = ["-created_at"]

    def __str__(self):
        return self.email


class Profile(models.Model):
    """Display information of a user, created together with the user."""

    user = models.OneToOneField(
        User, primary_key=True, on_delete=models.CASCADE, related_name="profile"
    )
    display_name = models.CharField(max_length=DISPLAY_NAME_MAX_LENGTH)
    avatar_url = models.URLField(max_length=500, null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "profiles"

    def __str__(self):
        return self.display_name


class UserRole(models.Model):
    """A role granted to a user. Presence of ``admin`` unlocks the admin API."""

    ROLE_CHOICES = [(role.value, role.name.title()) for role in Role]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="roles")
    role = models.CharField(max_length=20, choices=ROLE_CHOICES)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "user_roles"
        constraints = [
            models.UniqueConstraint(fields=["user", "role"], name="unique_user_role"),
        ]

    def __str__(self):
        return f"{self.user_id}:{self.role}"


class EmailConfirmationToken(models.Model):
    """Hashed, expiring email confirmation token; at most one per user."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="confirmation_tokens")
    token_hash = models.CharField(max_length=64, unique=True)
    expires_at = models.DateTimeField()
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "email_confirmation_tokens"
        indexes = [
            models.Index(fields=["user"]),
        ]


class PasswordResetToken(models.Model):
    """Hashed, expiring, single-use password reset token; at most one per user."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="reset_tokens")
    token_hash = models.CharField(max_length=64, unique=True)
    expires_at = models.DateTimeField()
    used = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "password_reset_tokens"
        indexes = [
            models.Index(fields=["user"]),
        ]
