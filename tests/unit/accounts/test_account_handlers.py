"""
Unit tests for registration, confirmation, login and password handlers.
"""
import asyncio
from datetime import timedelta

import pytest

from accounts.application.commands.confirm_email import (
    ConfirmEmailCommand,
    ResendConfirmationCommand,
)
from accounts.application.commands.login import LoginCommand
from accounts.application.commands.password_commands import (
    ChangePasswordCommand,
    ForgotPasswordCommand,
    ResetPasswordCommand,
)
from accounts.application.commands.register_account import RegisterAccountCommand
from accounts.application.handlers.password_handlers import (
    FORGOT_PASSWORD_MESSAGE,
    ChangePasswordHandler,
    ForgotPasswordHandler,
    ResetPasswordHandler,
)
from accounts.application.handlers.registration_handlers import (
    ConfirmEmailHandler,
    RegisterAccountHandler,
    ResendConfirmationHandler,
)
from accounts.application.handlers.session_handlers import GetCurrentUserHandler, LoginHandler
from accounts.application.handlers.list_users_handler import ListUsersHandler
from accounts.application.queries.get_current_user import GetCurrentUserQuery
from accounts.application.queries.list_users import ListUsersQuery
from accounts.domain.user import DISPLAY_NAME_MAX_LENGTH
from core.domain.exceptions import (
    AccountNotFoundError,
    AlreadyConfirmedError,
    DuplicateEmailError,
    EmailNotConfirmedError,
    InvalidCredentialsError,
    InvalidFieldError,
    InvalidOrExpiredTokenError,
    ServiceUnavailableError,
)
from core.domain.value_objects import Email, MailKind, Role
from tests.conftest import NOW, STRONG_PASSWORD

FRONTEND_URL = "http://frontend.test"


@pytest.fixture
def register_handler(account_repository, password_hasher, mailer, clock):
    return RegisterAccountHandler(
        account_repository=account_repository,
        password_hasher=password_hasher,
        mailer=mailer,
        frontend_url=FRONTEND_URL,
        clock=clock,
    )


@pytest.fixture
def confirm_handler(account_repository, token_signer, clock):
    return ConfirmEmailHandler(
        account_repository=account_repository,
        token_repository=account_repository,
        token_signer=token_signer,
        clock=clock,
    )


@pytest.fixture
def login_handler(account_repository, password_hasher, token_signer):
    return LoginHandler(
        account_repository=account_repository,
        password_hasher=password_hasher,
        token_signer=token_signer,
    )


@pytest.fixture
def forgot_handler(account_repository, mailer, clock):
    return ForgotPasswordHandler(
        account_repository=account_repository,
        token_repository=account_repository,
        mailer=mailer,
        frontend_url=FRONTEND_URL,
        clock=clock,
    )


@pytest.fixture
def reset_handler(account_repository, password_hasher, token_signer, clock):
    return ResetPasswordHandler(
        account_repository=account_repository,
        token_repository=account_repository,
        password_hasher=password_hasher,
        token_signer=token_signer,
        clock=clock,
    )


@pytest.mark.asyncio
class TestRegisterAccountHandler:
    """Tests for RegisterAccountHandler."""

    async def test_register_creates_unconfirmed_account(
        self, register_handler, account_repository, mailer, recorded_events
    ):
        result = await register_handler.handle(
            RegisterAccountCommand(email="New.User@Example.com", password=STRONG_PASSWORD)
        )

        assert result.email == "new.user@example.com"
        assert result.email_confirmed is False
        user = account_repository.users[result.user_id]
        assert user.email_confirmed is False
        assert user.password_hash != STRONG_PASSWORD
        assert account_repository.roles[user.id] == {Role.USER}
        assert account_repository.profiles[user.id].display_name == "new.user"
        assert "UserRegistered" in recorded_events.types()

    async def test_register_long_local_part_fits_display_name(self, register_handler, account_repository):
        local = "a" * 200

        result = await register_handler.handle(
            RegisterAccountCommand(email=f"{local}@example.com", password=STRONG_PASSWORD)
        )

        assert account_repository.profiles[result.user_id].display_name == local[:DISPLAY_NAME_MAX_LENGTH]

    async def test_register_mails_confirmation_link(self, register_handler, mailer):
        await register_handler.handle(
            RegisterAccountCommand(email="carol@example.com", password=STRONG_PASSWORD, display_name="Carol")
        )

        assert len(mailer.sent) == 1
        mail = mailer.sent[0]
        assert mail["to"] == "carol@example.com"
        assert mail["kind"] is MailKind.CONFIRMATION
        assert mail["params"]["username"] == "Carol"
        assert mail["params"]["link"].startswith(f"{FRONTEND_URL}/confirm-email?token=")

    async def test_register_duplicate_email_case_insensitive(self, register_handler, confirmed_user):
        with pytest.raises(DuplicateEmailError):
            await register_handler.handle(
                RegisterAccountCommand(email="ALICE@example.com", password=STRONG_PASSWORD)
            )

    async def test_register_invalid_email(self, register_handler):
        with pytest.raises(InvalidFieldError) as exc_info:
            await register_handler.handle(RegisterAccountCommand(email="nope", password=STRONG_PASSWORD))
        assert exc_info.value.field == "email"

    async def test_mail_failure_keeps_registration(self, register_handler, account_repository, mailer):
        mailer.failing = True

        result = await register_handler.handle(
            RegisterAccountCommand(email="dave@example.com", password=STRONG_PASSWORD)
        )

        assert result.user_id in account_repository.users

    async def test_concurrent_registrations_yield_one_account(self, register_handler, account_repository):
        command = RegisterAccountCommand(email="race@example.com", password=STRONG_PASSWORD)

        results = await asyncio.gather(
            register_handler.handle(command),
            register_handler.handle(command),
            return_exceptions=True,
        )

        assert sum(isinstance(r, DuplicateEmailError) for r in results) == 1
        assert len(account_repository.users) == 1


@pytest.mark.asyncio
class TestConfirmEmailHandler:
    """Tests for ConfirmEmailHandler."""

    async def test_confirm_signs_user_in(
        self, register_handler, confirm_handler, account_repository, mailer, token_signer
    ):
        registered = await register_handler.handle(
            RegisterAccountCommand(email="erin@example.com", password=STRONG_PASSWORD)
        )

        session = await confirm_handler.handle(ConfirmEmailCommand(token=mailer.last_token()))

        assert session.user.email_confirmed is True
        assert session.user.roles == ["user"]
        assert token_signer.verify(session.token) == registered.user_id
        assert account_repository.users[registered.user_id].email_confirmed is True

    async def test_token_is_single_use(self, register_handler, confirm_handler, mailer):
        await register_handler.handle(RegisterAccountCommand(email="erin@example.com", password=STRONG_PASSWORD))
        token = mailer.last_token()
        await confirm_handler.handle(ConfirmEmailCommand(token=token))

        with pytest.raises(InvalidOrExpiredTokenError):
            await confirm_handler.handle(ConfirmEmailCommand(token=token))

    async def test_expired_token(self, register_handler, confirm_handler, mailer, clock):
        await register_handler.handle(RegisterAccountCommand(email="erin@example.com", password=STRONG_PASSWORD))
        clock.advance(timedelta(hours=24, seconds=1))

        with pytest.raises(InvalidOrExpiredTokenError):
            await confirm_handler.handle(ConfirmEmailCommand(token=mailer.last_token()))

    @pytest.mark.parametrize("token", ["", "not-a-real-token"])
    async def test_unknown_token(self, confirm_handler, token):
        with pytest.raises(InvalidOrExpiredTokenError):
            await confirm_handler.handle(ConfirmEmailCommand(token=token))

    async def test_concurrent_confirmations_succeed_once(self, register_handler, confirm_handler, mailer):
        await register_handler.handle(RegisterAccountCommand(email="erin@example.com", password=STRONG_PASSWORD))
        command = ConfirmEmailCommand(token=mailer.last_token())

        results = await asyncio.gather(
            confirm_handler.handle(command),
            confirm_handler.handle(command),
            return_exceptions=True,
        )

        assert sum(isinstance(r, InvalidOrExpiredTokenError) for r in results) == 1


@pytest.mark.asyncio
class TestResendConfirmationHandler:
    """Tests for ResendConfirmationHandler."""

    @pytest.fixture
    def resend_handler(self, account_repository, mailer, clock):
        return ResendConfirmationHandler(
            account_repository=account_repository,
            token_repository=account_repository,
            mailer=mailer,
            frontend_url=FRONTEND_URL,
            clock=clock,
        )

    async def test_resend_invalidates_previous_token(
        self, register_handler, resend_handler, confirm_handler, mailer
    ):
        await register_handler.handle(RegisterAccountCommand(email="fay@example.com", password=STRONG_PASSWORD))
        first_token = mailer.last_token()

        result = await resend_handler.handle(ResendConfirmationCommand(email="FAY@example.com"))

        assert result.message == "Confirmation email sent"
        assert len(mailer.sent) == 2
        with pytest.raises(InvalidOrExpiredTokenError):
            await confirm_handler.handle(ConfirmEmailCommand(token=first_token))
        session = await confirm_handler.handle(ConfirmEmailCommand(token=mailer.last_token()))
        assert session.user.email == "fay@example.com"

    async def test_resend_unknown_email(self, resend_handler):
        with pytest.raises(AccountNotFoundError):
            await resend_handler.handle(ResendConfirmationCommand(email="ghost@example.com"))

    async def test_resend_already_confirmed(self, resend_handler, confirmed_user):
        with pytest.raises(AlreadyConfirmedError):
            await resend_handler.handle(ResendConfirmationCommand(email=confirmed_user.email.value))

    async def test_resend_mail_failure_propagates(self, register_handler, resend_handler, mailer):
        await register_handler.handle(RegisterAccountCommand(email="fay@example.com", password=STRONG_PASSWORD))
        mailer.failing = True

        with pytest.raises(ServiceUnavailableError):
            await resend_handler.handle(ResendConfirmationCommand(email="fay@example.com"))


@pytest.mark.asyncio
class TestLoginHandler:
    """Tests for LoginHandler."""

    async def test_login_success(self, login_handler, confirmed_user, token_signer, recorded_events):
        session = await login_handler.handle(
            LoginCommand(email="Alice@Example.com", password=STRONG_PASSWORD)
        )

        assert session.user.id == confirmed_user.id
        assert session.user.display_name == "alice"
        assert token_signer.verify(session.token) == confirmed_user.id
        assert "UserLoggedIn" in recorded_events.types()

    async def test_wrong_password(self, login_handler, confirmed_user):
        with pytest.raises(InvalidCredentialsError):
            await login_handler.handle(LoginCommand(email="alice@example.com", password="wrong-password"))

    async def test_unknown_email_same_error_and_burns_hash(self, login_handler, password_hasher):
        with pytest.raises(InvalidCredentialsError) as exc_info:
            await login_handler.handle(LoginCommand(email="ghost@example.com", password=STRONG_PASSWORD))

        assert exc_info.value.message == InvalidCredentialsError().message
        assert password_hasher.burned == 1

    async def test_malformed_email_is_invalid_credentials(self, login_handler, password_hasher):
        with pytest.raises(InvalidCredentialsError):
            await login_handler.handle(LoginCommand(email="not-an-email", password=STRONG_PASSWORD))
        assert password_hasher.burned == 1

    async def test_unconfirmed_email(self, login_handler, account_repository, password_hasher):
        account_repository.add_user("new@example.com", password_hasher.hash(STRONG_PASSWORD), confirmed=False)

        with pytest.raises(EmailNotConfirmedError):
            await login_handler.handle(LoginCommand(email="new@example.com", password=STRONG_PASSWORD))

    async def test_unconfirmed_with_wrong_password_is_invalid_credentials(
        self, login_handler, account_repository, password_hasher
    ):
        account_repository.add_user("new@example.com", password_hasher.hash(STRONG_PASSWORD), confirmed=False)

        with pytest.raises(InvalidCredentialsError):
            await login_handler.handle(LoginCommand(email="new@example.com", password="wrong-password"))


@pytest.mark.asyncio
class TestPasswordReset:
    """Tests for ForgotPasswordHandler and ResetPasswordHandler."""

    async def test_forgot_unknown_email_is_generic(self, forgot_handler, mailer):
        result = await forgot_handler.handle(ForgotPasswordCommand(email="ghost@example.com"))

        assert result.message == FORGOT_PASSWORD_MESSAGE
        assert mailer.sent == []

    async def test_forgot_malformed_email_is_generic(self, forgot_handler, mailer):
        result = await forgot_handler.handle(ForgotPasswordCommand(email="garbage"))

        assert result.message == FORGOT_PASSWORD_MESSAGE
        assert mailer.sent == []

    async def test_forgot_sends_reset_link(self, forgot_handler, mailer, confirmed_user):
        result = await forgot_handler.handle(ForgotPasswordCommand(email="alice@example.com"))

        assert result.message == FORGOT_PASSWORD_MESSAGE
        assert mailer.sent[0]["kind"] is MailKind.PASSWORD_RESET
        assert mailer.sent[0]["params"]["link"].startswith(f"{FRONTEND_URL}/reset-password?token=")

    async def test_forgot_mail_failure_propagates(self, forgot_handler, mailer, confirmed_user):
        mailer.failing = True
        with pytest.raises(ServiceUnavailableError):
            await forgot_handler.handle(ForgotPasswordCommand(email="alice@example.com"))

    async def test_reset_sets_new_password_and_signs_in(
        self, forgot_handler, reset_handler, login_handler, mailer, confirmed_user
    ):
        await forgot_handler.handle(ForgotPasswordCommand(email="alice@example.com"))

        session = await reset_handler.handle(
            ResetPasswordCommand(token=mailer.last_token(), new_password="An0ther-Secret-Pass")
        )

        assert session.user.id == confirmed_user.id
        with pytest.raises(InvalidCredentialsError):
            await login_handler.handle(LoginCommand(email="alice@example.com", password=STRONG_PASSWORD))
        await login_handler.handle(LoginCommand(email="alice@example.com", password="An0ther-Secret-Pass"))

    async def test_reset_token_single_use(self, forgot_handler, reset_handler, mailer, confirmed_user):
        await forgot_handler.handle(ForgotPasswordCommand(email="alice@example.com"))
        token = mailer.last_token()
        await reset_handler.handle(ResetPasswordCommand(token=token, new_password="An0ther-Secret-Pass"))

        with pytest.raises(InvalidOrExpiredTokenError):
            await reset_handler.handle(ResetPasswordCommand(token=token, new_password="Th1rd-Secret-Pass"))

    async def test_reset_token_expires_after_an_hour(
        self, forgot_handler, reset_handler, mailer, clock, confirmed_user
    ):
        await forgot_handler.handle(ForgotPasswordCommand(email="alice@example.com"))
        clock.advance(timedelta(hours=1))

        with pytest.raises(InvalidOrExpiredTokenError):
            await reset_handler.handle(
                ResetPasswordCommand(token=mailer.last_token(), new_password="An0ther-Secret-Pass")
            )

    async def test_new_request_supersedes_old_token(self, forgot_handler, reset_handler, mailer, confirmed_user):
        await forgot_handler.handle(ForgotPasswordCommand(email="alice@example.com"))
        old_token = mailer.last_token()
        await forgot_handler.handle(ForgotPasswordCommand(email="alice@example.com"))

        with pytest.raises(InvalidOrExpiredTokenError):
            await reset_handler.handle(ResetPasswordCommand(token=old_token, new_password="An0ther-Secret-Pass"))

    async def test_concurrent_resets_succeed_once(self, forgot_handler, reset_handler, mailer, confirmed_user):
        await forgot_handler.handle(ForgotPasswordCommand(email="alice@example.com"))
        token = mailer.last_token()

        results = await asyncio.gather(
            reset_handler.handle(ResetPasswordCommand(token=token, new_password="An0ther-Secret-Pass")),
            reset_handler.handle(ResetPasswordCommand(token=token, new_password="Th1rd-Secret-Pass")),
            return_exceptions=True,
        )

        assert sum(isinstance(r, InvalidOrExpiredTokenError) for r in results) == 1


@pytest.mark.asyncio
class TestChangePasswordHandler:
    """Tests for ChangePasswordHandler."""

    async def test_change_password(self, account_repository, password_hasher, confirmed_user):
        handler = ChangePasswordHandler(account_repository, password_hasher)

        result = await handler.handle(
            ChangePasswordCommand(
                user_id=confirmed_user.id,
                current_password=STRONG_PASSWORD,
                new_password="An0ther-Secret-Pass",
            )
        )

        assert result.message == "Password updated"
        stored = account_repository.users[confirmed_user.id].password_hash
        assert password_hasher.verify("An0ther-Secret-Pass", stored)

    async def test_wrong_current_password(self, account_repository, password_hasher, confirmed_user):
        handler = ChangePasswordHandler(account_repository, password_hasher)

        with pytest.raises(InvalidCredentialsError):
            await handler.handle(
                ChangePasswordCommand(
                    user_id=confirmed_user.id,
                    current_password="wrong-password",
                    new_password="An0ther-Secret-Pass",
                )
            )


@pytest.mark.asyncio
class TestAccountQueries:
    """Tests for GetCurrentUserHandler and ListUsersHandler."""

    async def test_current_user(self, account_repository, admin_user):
        user = await GetCurrentUserHandler(account_repository).handle(GetCurrentUserQuery(user_id=admin_user.id))

        assert user.email == "admin@example.com"
        assert user.roles == ["admin", "user"]
        assert user.created_at == NOW

    async def test_list_users_newest_first(self, account_repository):
        older = account_repository.add_user("old@example.com", "x", created_at=NOW - timedelta(days=2))
        newer = account_repository.add_user("new@example.com", "x", created_at=NOW)

        users = await ListUsersHandler(account_repository).handle(ListUsersQuery())

        assert [u.id for u in users] == [newer.id, older.id]
        assert users[0].display_name == Email("new@example.com").local_part
