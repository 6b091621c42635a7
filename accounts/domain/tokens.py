"""
Single-use verification tokens for email confirmation and password reset.

The raw token is handed to the user exactly once (inside an email link);
only its SHA-256 digest is persisted and looked up.
"""

import hashlib
import secrets
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Tuple


def generate_raw_token() -> str:
    """Return a URL-safe random token with 256 bits of entropy."""
    return secrets.token_urlsafe(32)


def hash_token(raw_token: str) -> str:
    """
    Hash a raw verification token for storage and lookup.

    Args:
        raw_token: Token as received in a link

    Returns:
        Hex-encoded SHA-256 digest
    """
    return hashlib.sha256(raw_token.encode()).hexdigest()


@dataclass(frozen=True)
class EmailConfirmationToken:
    """Pending email confirmation for a user."""

    id: uuid.UUID
    user_id: uuid.UUID
    token_hash: str
    expires_at: datetime
    created_at: datetime

    @classmethod
    def issue(
        cls, user_id: uuid.UUID, ttl: timedelta, now: datetime
    ) -> Tuple["EmailConfirmationToken", str]:
        """
        Issue a fresh confirmation token.

        Returns:
            Tuple of (token entity, raw token to embed in the link)
        """
        raw = generate_raw_token()
        token = cls(
            id=uuid.uuid4(),
            user_id=user_id,
            token_hash=hash_token(raw),
            expires_at=now + ttl,
            created_at=now,
        )
        return token, raw

    def is_valid(self, now: datetime) -> bool:
        """A confirmation token is valid until it expires."""
        return self.expires_at > now


@dataclass(frozen=True)
class PasswordResetToken:
    """Pending password reset for a user."""

    id: uuid.UUID
    user_id: uuid.UUID
    token_hash: str
    expires_at: datetime
    used: bool
    created_at: datetime

    @classmethod
    def issue(
        cls, user_id: uuid.UUID, ttl: timedelta, now: datetime
    ) -> Tuple["PasswordResetToken", str]:
        """
        Issue a fresh password reset token.

        Returns:
            Tuple of (token entity, raw token to embed in the link)
        """
        raw = generate_raw_token()
        token = cls(
            id=uuid.uuid4(),
            user_id=user_id,
            token_hash=hash_token(raw),
            expires_at=now + ttl,
            used=False,
            created_at=now,
        )
        return token, raw

    def is_valid(self, now: datetime) -> bool:
        """Valid while unexpired and not yet used."""
        return not self.used and self.expires_at > now

    def mark_used(self) -> "PasswordResetToken":
        """Return a copy flagged as used."""
        return replace(self, used=True)
