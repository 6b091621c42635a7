"""
Account DTOs for API responses.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from accounts.domain.user import UserAccount


@dataclass
class UserDTO:
    """DTO for a user with profile and roles."""

    id: uuid.UUID
    email: str
    email_confirmed: bool
    display_name: str
    avatar_url: Optional[str]
    roles: List[str]
    created_at: datetime

    @classmethod
    def from_account(cls, account: UserAccount) -> "UserDTO":
        """Flatten an account read model."""
        user = account.user
        profile = account.profile
        return cls(
            id=user.id,
            email=user.email.value,
            email_confirmed=user.email_confirmed,
            display_name=profile.display_name if profile else user.email.local_part,
            avatar_url=profile.avatar_url if profile else None,
            roles=sorted(role.value for role in account.roles),
            created_at=user.created_at,
        )


@dataclass
class SessionDTO:
    """DTO returned whenever a session token is issued."""

    user: UserDTO
    token: str


@dataclass
class RegistrationResultDTO:
    """DTO for a registration awaiting email confirmation."""

    user_id: uuid.UUID
    email: str
    email_confirmed: bool
    message: str


@dataclass
class MessageDTO:
    """DTO for operations that only acknowledge."""

    message: str
