"""
Verification token repository port (interface).
"""
from abc import ABC, abstractmethod
from typing import Optional

from accounts.domain.tokens import EmailConfirmationToken, PasswordResetToken


class VerificationTokenRepository(ABC):
    """
    Abstract repository for email confirmation and password reset tokens.

    Each user holds at most one outstanding token of each kind: issuing
    a new one replaces whatever was there.
    """

    @abstractmethod
    async def replace_confirmation_token(self, token: EmailConfirmationToken) -> None:
        """
        Delete the user's previous confirmation tokens and store this one.

        Args:
            token: Freshly issued token
        """
        pass

    @abstractmethod
    async def find_confirmation_token(self, token_hash: str) -> Optional[EmailConfirmationToken]:
        """
        Find a confirmation token by its hash.

        Args:
            token_hash: SHA-256 digest of the raw token

        Returns:
            Token entity or None if not found
        """
        pass

    @abstractmethod
    async def replace_reset_token(self, token: PasswordResetToken) -> None:
        """
        Delete the user's previous reset tokens and store this one.

        Args:
            token: Freshly issued token
        """
        pass

    @abstractmethod
    async def find_reset_token(self, token_hash: str) -> Optional[PasswordResetToken]:
        """
        Find a password reset token by its hash.

        Args:
            token_hash: SHA-256 digest of the raw token

        Returns:
            Token entity or None if not found
        """
        pass
