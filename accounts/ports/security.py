"""
Security ports: password hashing and session token signing.
"""
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional


class PasswordHasher(ABC):
    """One-way password hashing."""

    @abstractmethod
    def hash(self, raw_password: str) -> str:
        """Return a salted one-way hash of the password."""
        pass

    @abstractmethod
    def verify(self, raw_password: str, password_hash: str) -> bool:
        """Check a password against a stored hash."""
        pass

    @abstractmethod
    def burn(self, raw_password: str) -> None:
        """
        Spend the same work as ``verify`` without a stored hash.

        Used when the account does not exist so that response time does
        not reveal whether an email is registered.
        """
        pass


class TokenSigner(ABC):
    """Signed, time-limited session tokens carrying a user id."""

    @abstractmethod
    def issue(self, user_id: uuid.UUID, now: Optional[datetime] = None) -> str:
        """
        Sign a session token for a user.

        Args:
            user_id: Subject of the token
            now: Issue time, defaults to the current time

        Returns:
            Encoded token
        """
        pass

    @abstractmethod
    def verify(self, token: str) -> uuid.UUID:
        """
        Verify signature and expiry and return the subject.

        Raises:
            UnauthenticatedError: If the token is malformed, forged or expired
        """
        pass
