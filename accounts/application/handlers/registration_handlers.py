"""
Registration and email confirmation handlers.
"""
import logging
from datetime import timedelta

from accounts.application.commands.confirm_email import (
    ConfirmEmailCommand,
    ResendConfirmationCommand,
)
from accounts.application.commands.register_account import RegisterAccountCommand
from accounts.application.dto.account_dto import MessageDTO, RegistrationResultDTO, SessionDTO
from accounts.application.handlers.common import issue_session, parse_email
from accounts.application.links import confirmation_link
from accounts.domain.events import EmailConfirmed, UserRegistered
from accounts.domain.tokens import EmailConfirmationToken, hash_token
from accounts.domain.user import Profile, User
from accounts.ports.account_repository import AccountRepository
from accounts.ports.mailer import Mailer
from accounts.ports.security import PasswordHasher, TokenSigner
from accounts.ports.verification_token_repository import VerificationTokenRepository
from core.domain.clock import Clock, utc_now
from core.domain.exceptions import (
    AccountNotFoundError,
    AlreadyConfirmedError,
    DuplicateEmailError,
    InvalidOrExpiredTokenError,
    ServiceUnavailableError,
)
from core.domain.value_objects import MailKind, Role
from core.infrastructure.events import event_bus

logger = logging.getLogger(__name__)

REGISTRATION_MESSAGE = "Registration successful. Check your email to confirm your account."


class RegisterAccountHandler:
    """Handler for RegisterAccountCommand."""

    def __init__(
        self,
        account_repository: AccountRepository,
        password_hasher: PasswordHasher,
        mailer: Mailer,
        frontend_url: str,
        confirmation_ttl: timedelta = timedelta(hours=24),
        clock: Clock = utc_now,
    ):
        """Initialize handler with repositories and collaborators."""
        self.account_repository = account_repository
        self.password_hasher = password_hasher
        self.mailer = mailer
        self.frontend_url = frontend_url
        self.confirmation_ttl = confirmation_ttl
        self.clock = clock

    async def handle(self, command: RegisterAccountCommand) -> RegistrationResultDTO:
        """
        Handle account registration.

        Creates user, profile, ``user`` role and a confirmation token in one
        transaction, then mails the confirmation link. A mail failure is
        logged and does not undo the registration; the user can ask for a
        resend.

        Args:
            command: RegisterAccountCommand

        Returns:
            RegistrationResultDTO (no session token is issued before confirmation)

        Raises:
            InvalidFieldError: If the email is malformed
            DuplicateEmailError: If the email is already registered
        """
        email = parse_email(command.email)
        if await self.account_repository.find_by_email(email) is not None:
            raise DuplicateEmailError()

        now = self.clock()
        user = User.create(email, self.password_hasher.hash(command.password), now)
        profile = Profile.for_user(user, command.display_name)
        token, raw_token = EmailConfirmationToken.issue(user.id, self.confirmation_ttl, now)

        await self.account_repository.create_account(user, profile, [Role.USER], token)
        await event_bus.publish(UserRegistered(user_id=user.id, email=email.value))

        try:
            await self.mailer.send(
                email.value,
                MailKind.CONFIRMATION,
                {
                    "username": profile.display_name,
                    "link": confirmation_link(self.frontend_url, raw_token),
                },
            )
        except ServiceUnavailableError as e:
            logger.warning(
                "Confirmation email not sent after registration: %s",
                e.message,
                extra={"user_id": str(user.id)},
            )

        return RegistrationResultDTO(
            user_id=user.id,
            email=email.value,
            email_confirmed=False,
            message=REGISTRATION_MESSAGE,
        )


class ConfirmEmailHandler:
    """Handler for ConfirmEmailCommand."""

    def __init__(
        self,
        account_repository: AccountRepository,
        token_repository: VerificationTokenRepository,
        token_signer: TokenSigner,
        clock: Clock = utc_now,
    ):
        self.account_repository = account_repository
        self.token_repository = token_repository
        self.token_signer = token_signer
        self.clock = clock

    async def handle(self, command: ConfirmEmailCommand) -> SessionDTO:
        """
        Consume a confirmation token and sign the user in.

        Raises:
            InvalidOrExpiredTokenError: Unknown, expired or already consumed token
        """
        if not command.token:
            raise InvalidOrExpiredTokenError()

        token = await self.token_repository.find_confirmation_token(hash_token(command.token))
        if token is None or not token.is_valid(self.clock()):
            raise InvalidOrExpiredTokenError()

        # Loses to a concurrent confirmation of the same token
        if not await self.account_repository.confirm_email(token.id, token.user_id):
            raise InvalidOrExpiredTokenError()

        user = await self.account_repository.find_by_id(token.user_id)
        if user is None:
            raise InvalidOrExpiredTokenError()

        await event_bus.publish(EmailConfirmed(user_id=user.id))
        return await issue_session(self.account_repository, self.token_signer, user)


class ResendConfirmationHandler:
    """Handler for ResendConfirmationCommand."""

    def __init__(
        self,
        account_repository: AccountRepository,
        token_repository: VerificationTokenRepository,
        mailer: Mailer,
        frontend_url: str,
        confirmation_ttl: timedelta = timedelta(hours=24),
        clock: Clock = utc_now,
    ):
        self.account_repository = account_repository
        self.token_repository = token_repository
        self.mailer = mailer
        self.frontend_url = frontend_url
        self.confirmation_ttl = confirmation_ttl
        self.clock = clock

    async def handle(self, command: ResendConfirmationCommand) -> MessageDTO:
        """
        Replace the user's confirmation token and mail the new one.

        Raises:
            AccountNotFoundError: No account with this email
            AlreadyConfirmedError: The email is already confirmed
            ServiceUnavailableError: The email could not be sent
        """
        email = parse_email(command.email)
        user = await self.account_repository.find_by_email(email)
        if user is None:
            raise AccountNotFoundError()
        if user.email_confirmed:
            raise AlreadyConfirmedError()

        token, raw_token = EmailConfirmationToken.issue(user.id, self.confirmation_ttl, self.clock())
        await self.token_repository.replace_confirmation_token(token)

        profile = await self.account_repository.get_profile(user.id)
        await self.mailer.send(
            email.value,
            MailKind.CONFIRMATION,
            {
                "username": profile.display_name if profile else email.local_part,
                "link": confirmation_link(self.frontend_url, raw_token),
            },
        )
        return MessageDTO(message="Confirmation email sent")
