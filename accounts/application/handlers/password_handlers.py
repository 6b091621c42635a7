"""
Password reset and change handlers.
"""
import logging
from datetime import timedelta

from accounts.application.commands.password_commands import (
    ChangePasswordCommand,
    ForgotPasswordCommand,
    ResetPasswordCommand,
)
from accounts.application.dto.account_dto import MessageDTO, SessionDTO
from accounts.application.handlers.common import issue_session
from accounts.application.links import password_reset_link
from accounts.domain.events import PasswordChanged, PasswordResetCompleted, PasswordResetRequested
from accounts.domain.tokens import PasswordResetToken, hash_token
from accounts.ports.account_repository import AccountRepository
from accounts.ports.mailer import Mailer
from accounts.ports.security import PasswordHasher, TokenSigner
from accounts.ports.verification_token_repository import VerificationTokenRepository
from core.domain.clock import Clock, utc_now
from core.domain.exceptions import (
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    UserNotFoundError,
)
from core.domain.value_objects import Email, MailKind
from core.infrastructure.events import event_bus

logger = logging.getLogger(__name__)

FORGOT_PASSWORD_MESSAGE = "If an account exists for this email, a password reset link has been sent."


class ForgotPasswordHandler:
    """Handler for ForgotPasswordCommand."""

    def __init__(
        self,
        account_repository: AccountRepository,
        token_repository: VerificationTokenRepository,
        mailer: Mailer,
        frontend_url: str,
        reset_ttl: timedelta = timedelta(hours=1),
        clock: Clock = utc_now,
    ):
        self.account_repository = account_repository
        self.token_repository = token_repository
        self.mailer = mailer
        self.frontend_url = frontend_url
        self.reset_ttl = reset_ttl
        self.clock = clock

    async def handle(self, command: ForgotPasswordCommand) -> MessageDTO:
        """
        Mail a reset link if the account exists.

        The response is identical whether or not the email is registered.

        Raises:
            ServiceUnavailableError: The reset email could not be sent
        """
        try:
            email = Email(command.email)
        except ValueError:
            return MessageDTO(message=FORGOT_PASSWORD_MESSAGE)

        user = await self.account_repository.find_by_email(email)
        if user is None:
            logger.info("Password reset requested for unknown email")
            return MessageDTO(message=FORGOT_PASSWORD_MESSAGE)

        token, raw_token = PasswordResetToken.issue(user.id, self.reset_ttl, self.clock())
        await self.token_repository.replace_reset_token(token)

        profile = await self.account_repository.get_profile(user.id)
        await self.mailer.send(
            email.value,
            MailKind.PASSWORD_RESET,
            {
                "username": profile.display_name if profile else email.local_part,
                "link": password_reset_link(self.frontend_url, raw_token),
            },
        )
        await event_bus.publish(PasswordResetRequested(user_id=user.id))
        return MessageDTO(message=FORGOT_PASSWORD_MESSAGE)


class ResetPasswordHandler:
    """Handler for ResetPasswordCommand."""

    def __init__(
        self,
        account_repository: AccountRepository,
        token_repository: VerificationTokenRepository,
        password_hasher: PasswordHasher,
        token_signer: TokenSigner,
        clock: Clock = utc_now,
    ):
        self.account_repository = account_repository
        self.token_repository = token_repository
        self.password_hasher = password_hasher
        self.token_signer = token_signer
        self.clock = clock

    async def handle(self, command: ResetPasswordCommand) -> SessionDTO:
        """
        Redeem a reset token, store the new password and sign the user in.

        Raises:
            InvalidOrExpiredTokenError: Unknown, expired or already used token
        """
        if not command.token:
            raise InvalidOrExpiredTokenError()

        token = await self.token_repository.find_reset_token(hash_token(command.token))
        if token is None or not token.is_valid(self.clock()):
            raise InvalidOrExpiredTokenError()

        password_hash = self.password_hasher.hash(command.new_password)
        if not await self.account_repository.reset_password(token.id, token.user_id, password_hash):
            raise InvalidOrExpiredTokenError()

        user = await self.account_repository.find_by_id(token.user_id)
        if user is None:
            raise InvalidOrExpiredTokenError()

        await event_bus.publish(PasswordResetCompleted(user_id=user.id))
        return await issue_session(self.account_repository, self.token_signer, user)


class ChangePasswordHandler:
    """Handler for ChangePasswordCommand."""

    def __init__(self, account_repository: AccountRepository, password_hasher: PasswordHasher):
        self.account_repository = account_repository
        self.password_hasher = password_hasher

    async def handle(self, command: ChangePasswordCommand) -> MessageDTO:
        """
        Change the password after re-verifying the current one.

        Existing session tokens stay valid.

        Raises:
            InvalidCredentialsError: The current password does not verify
        """
        user = await self.account_repository.find_by_id(command.user_id)
        if user is None:
            raise UserNotFoundError()

        if not self.password_hasher.verify(command.current_password, user.password_hash):
            raise InvalidCredentialsError("Current password is incorrect")

        await self.account_repository.update_password(
            user.id, self.password_hasher.hash(command.new_password)
        )
        await event_bus.publish(PasswordChanged(user_id=user.id))
        return MessageDTO(message="Password updated")
