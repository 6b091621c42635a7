"""
Django admin configuration for accounts app.
"""

from django.contrib import admin
from django.utils.html import format_html

from accounts.infrastructure.models import (
    EmailConfirmationToken,
    PasswordResetToken,
    Profile,
    User,
    UserRole,
)


class ProfileInline(admin.StackedInline):
    """Inline profile on the user page."""

    model = Profile
    can_delete = False
    fields = ["display_name", "avatar_url", "created_at"]
    readonly_fields = ["created_at"]


class UserRoleInline(admin.TabularInline):
    """Inline roles on the user page."""

    model = UserRole
    extra = 0
    fields = ["role", "created_at"]
    readonly_fields = ["created_at"]


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    """Admin interface for User model."""

    list_display = ["email", "confirmed_display", "roles_display", "created_at"]
    list_filter = ["email_confirmed", "roles__role", "created_at"]
    search_fields = ["email", "profile__display_name"]
    readonly_fields = ["id", "password_hash", "created_at", "updated_at"]
    inlines = [ProfileInline, UserRoleInline]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "email", "email_confirmed"),
            },
        ),
        (
            "Credentials",
            {
                "fields": ("password_hash",),
                "description": "Only the one-way hash is stored.",
                "classes": ("collapse",),
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

    def confirmed_display(self, obj):
        """Display confirmation status with color."""
        if obj.email_confirmed:
            return format_html('<span style="color: green;">✓ Confirmed</span>')
        return format_html('<span style="color: #999;">Pending</span>')

    confirmed_display.short_description = "Email"

    def roles_display(self, obj):
        """Display granted roles."""
        return ", ".join(sorted(role.role for role in obj.roles.all()))

    roles_display.short_description = "Roles"

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("profile").prefetch_related("roles")


@admin.register(EmailConfirmationToken)
class EmailConfirmationTokenAdmin(admin.ModelAdmin):
    """Admin interface for pending email confirmations."""

    list_display = ["user", "expires_at", "created_at"]
    search_fields = ["user__email"]
    readonly_fields = ["id", "user", "token_hash", "expires_at", "created_at"]

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("user")


@admin.register(PasswordResetToken)
class PasswordResetTokenAdmin(admin.ModelAdmin):
    """Admin interface for password reset tokens."""

    list_display = ["user", "used", "expires_at", "created_at"]
    list_filter = ["used"]
    search_fields = ["user__email"]
    readonly_fields = ["id", "user", "token_hash", "expires_at", "used", "created_at"]

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("user")
