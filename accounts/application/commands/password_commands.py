"""
Password reset and change commands.
"""
import uuid
from dataclasses import dataclass


@dataclass
class ForgotPasswordCommand:
    """Request a password reset link."""

    email: str


@dataclass
class ResetPasswordCommand:
    """Redeem a reset token and set a new password."""

    token: str
    new_password: str


@dataclass
class ChangePasswordCommand:
    """Change the password of an authenticated user."""

    user_id: uuid.UUID
    current_password: str
    new_password: str
