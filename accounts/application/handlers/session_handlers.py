"""
Login, authentication and current-user handlers.
"""
import logging
import uuid
from typing import Optional

from accounts.application.commands.login import LoginCommand
from accounts.application.dto.account_dto import SessionDTO, UserDTO
from accounts.application.handlers.common import issue_session, load_account
from accounts.application.queries.get_current_user import GetCurrentUserQuery
from accounts.domain.events import UserLoggedIn
from accounts.domain.user import User
from accounts.ports.account_repository import AccountRepository
from accounts.ports.security import PasswordHasher, TokenSigner
from core.domain.exceptions import (
    EmailNotConfirmedError,
    InvalidCredentialsError,
    UnauthenticatedError,
    UserNotFoundError,
)
from core.domain.value_objects import Email
from core.infrastructure.events import event_bus
from core.metrics import login_attempts_total

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class LoginHandler:
    """Handler for LoginCommand."""

    def __init__(
        self,
        account_repository: AccountRepository,
        password_hasher: PasswordHasher,
        token_signer: TokenSigner,
    ):
        self.account_repository = account_repository
        self.password_hasher = password_hasher
        self.token_signer = token_signer

    async def handle(self, command: LoginCommand) -> SessionDTO:
        """
        Handle login.

        Unknown emails and wrong passwords fail with the same error, and an
        unknown email still pays for one hash computation.

        Raises:
            InvalidCredentialsError: If the email/password pair does not verify
            EmailNotConfirmedError: If the password verifies but the email is unconfirmed
        """
        try:
            email = Email(command.email)
        except ValueError:
            email = None

        user = await self.account_repository.find_by_email(email) if email else None
        if user is None:
            self.password_hasher.burn(command.password)
            login_attempts_total.labels(outcome="invalid_credentials").inc()
            raise InvalidCredentialsError()

        if not self.password_hasher.verify(command.password, user.password_hash):
            login_attempts_total.labels(outcome="invalid_credentials").inc()
            raise InvalidCredentialsError()

        if not user.email_confirmed:
            login_attempts_total.labels(outcome="email_not_confirmed").inc()
            raise EmailNotConfirmedError()

        login_attempts_total.labels(outcome="success").inc()
        await event_bus.publish(UserLoggedIn(user_id=user.id))
        return await issue_session(self.account_repository, self.token_signer, user)


class AuthenticateHandler:
    """Resolves an ``Authorization`` header value to a user."""

    def __init__(self, account_repository: AccountRepository, token_signer: TokenSigner):
        self.account_repository = account_repository
        self.token_signer = token_signer

    async def handle(self, authorization: Optional[str]) -> User:
        """
        Verify a bearer token and load its subject.

        Args:
            authorization: Raw ``Authorization`` header value

        Returns:
            The authenticated user

        Raises:
            UnauthenticatedError: Missing, malformed, forged or expired token
            UserNotFoundError: The token is valid but its user no longer exists
        """
        if not authorization or not authorization.startswith(BEARER_PREFIX):
            raise UnauthenticatedError("Missing or malformed bearer token")

        token = authorization[len(BEARER_PREFIX):].strip()
        if not token:
            raise UnauthenticatedError("Missing or malformed bearer token")

        user_id: uuid.UUID = self.token_signer.verify(token)
        user = await self.account_repository.find_by_id(user_id)
        if user is None:
            logger.info("Session token subject no longer exists", extra={"user_id": str(user_id)})
            raise UserNotFoundError()
        return user


class GetCurrentUserHandler:
    """Handler for GetCurrentUserQuery."""

    def __init__(self, account_repository: AccountRepository):
        self.account_repository = account_repository

    async def handle(self, query: GetCurrentUserQuery) -> UserDTO:
        """Return the user with profile and roles."""
        user = await self.account_repository.find_by_id(query.user_id)
        if user is None:
            raise UserNotFoundError()
        account = await load_account(self.account_repository, user)
        return UserDTO.from_account(account)
