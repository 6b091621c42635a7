"""
Account repository port (interface).

This defines the contract for user, profile and role persistence.
Implementations are in the infrastructure layer.
"""
import uuid
from abc import ABC, abstractmethod
from typing import FrozenSet, Iterable, List, Optional

from accounts.domain.tokens import EmailConfirmationToken
from accounts.domain.user import Profile, User, UserAccount
from core.domain.value_objects import Email, Role


class AccountRepository(ABC):
    """
    Abstract repository for user accounts.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def find_by_email(self, email: Email) -> Optional[User]:
        """
        Find a user by normalized email.

        Args:
            email: Email value object

        Returns:
            User entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        """
        Find a user by ID.

        Args:
            user_id: User UUID

        Returns:
            User entity or None if not found
        """
        pass

    @abstractmethod
    async def get_profile(self, user_id: uuid.UUID) -> Optional[Profile]:
        """Return the profile of a user, if any."""
        pass

    @abstractmethod
    async def get_roles(self, user_id: uuid.UUID) -> FrozenSet[Role]:
        """Return every role currently granted to a user."""
        pass

    @abstractmethod
    async def has_role(self, user_id: uuid.UUID, role: Role) -> bool:
        """
        Check a role with a fresh read.

        Args:
            user_id: User UUID
            role: Role to look for

        Returns:
            True if the role row exists right now
        """
        pass

    @abstractmethod
    async def create_account(
        self,
        user: User,
        profile: Profile,
        roles: Iterable[Role],
        confirmation_token: EmailConfirmationToken,
    ) -> User:
        """
        Persist a new account as one atomic unit.

        Writes the user, its profile, its roles and its first confirmation
        token; either all rows exist afterwards or none do.

        Raises:
            DuplicateEmailError: If the email is already registered
        """
        pass

    @abstractmethod
    async def confirm_email(self, token_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        """
        Consume a confirmation token and mark its user confirmed, atomically.

        Returns:
            False if the token was already consumed by a concurrent request
        """
        pass

    @abstractmethod
    async def reset_password(
        self, token_id: uuid.UUID, user_id: uuid.UUID, password_hash: str
    ) -> bool:
        """
        Mark a reset token used and store the new hash, atomically.

        Returns:
            False if the token was already used
        """
        pass

    @abstractmethod
    async def update_password(self, user_id: uuid.UUID, password_hash: str) -> None:
        """Replace the stored password hash of a user."""
        pass

    @abstractmethod
    async def grant_role(self, user_id: uuid.UUID, role: Role) -> bool:
        """Grant a role; returns False if it was already granted."""
        pass

    @abstractmethod
    async def revoke_role(self, user_id: uuid.UUID, role: Role) -> bool:
        """Revoke a role; returns False if it was not granted."""
        pass

    @abstractmethod
    async def list_accounts(self) -> List[UserAccount]:
        """List every account with profile and roles, newest first."""
        pass

    @abstractmethod
    async def count_users(self) -> int:
        """Return the number of registered users."""
        pass
