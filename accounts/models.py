"""
Model registry entry point for the accounts app.
"""
from accounts.infrastructure.models import (  # noqa: F401
    EmailConfirmationToken,
    PasswordResetToken,
    Profile,
    User,
    UserRole,
)
