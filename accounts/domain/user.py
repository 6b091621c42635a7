"""
User and Profile domain entities.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import FrozenSet, Optional

from core.domain.value_objects import Email, Role

DISPLAY_NAME_MAX_LENGTH = 150


@dataclass(frozen=True)
class User:
    """
    User domain entity.

    The password hash is opaque here; hashing and verification live
    behind the PasswordHasher port.
    """

    id: uuid.UUID
    email: Email
    password_hash: str
    email_confirmed: bool
    created_at: datetime

    @classmethod
    def create(cls, email: Email, password_hash: str, now: datetime) -> "User":
        """
        Factory method to create a new, unconfirmed user.

        Args:
            email: Normalized email address
            password_hash: Already-hashed password
            now: Creation timestamp

        Returns:
            New User instance
        """
        return cls(
            id=uuid.uuid4(),
            email=email,
            password_hash=password_hash,
            email_confirmed=False,
            created_at=now,
        )


@dataclass(frozen=True)
class Profile:
    """Public-facing profile of a user, one per user."""

    user_id: uuid.UUID
    display_name: str
    avatar_url: Optional[str]
    created_at: datetime

    @classmethod
    def for_user(cls, user: User, display_name: Optional[str] = None) -> "Profile":
        """Build the profile created alongside a new user."""
        name = ((display_name or "").strip() or user.email.local_part)[:DISPLAY_NAME_MAX_LENGTH]
        return cls(
            user_id=user.id,
            display_name=name,
            avatar_url=None,
            created_at=user.created_at,
        )


@dataclass(frozen=True)
class UserAccount:
    """Read model joining a user with their profile and role set."""

    user: User
    profile: Optional[Profile]
    roles: FrozenSet[Role]

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self.roles
