"""
Email confirmation commands.
"""
from dataclasses import dataclass


@dataclass
class ConfirmEmailCommand:
    """Redeem the raw token from a confirmation link."""

    token: str


@dataclass
class ResendConfirmationCommand:
    """Issue and mail a fresh confirmation token."""

    email: str
