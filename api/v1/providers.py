"""
Wiring of repositories, gateways and handlers for the HTTP layer.

Repositories are stateless and shared; handlers are built per request so
settings overrides apply.
"""

from django.conf import settings

from accounts.application.handlers.list_users_handler import ListUsersHandler
from accounts.application.handlers.password_handlers import (
    ChangePasswordHandler,
    ForgotPasswordHandler,
    ResetPasswordHandler,
)
from accounts.application.handlers.registration_handlers import (
    ConfirmEmailHandler,
    RegisterAccountHandler,
    ResendConfirmationHandler,
)
from accounts.application.handlers.session_handlers import (
    AuthenticateHandler,
    GetCurrentUserHandler,
    LoginHandler,
)
from accounts.infrastructure.mailer import DjangoMailer
from accounts.infrastructure.repositories.django_account_repository import DjangoAccountRepository
from accounts.infrastructure.repositories.django_verification_token_repository import (
    DjangoVerificationTokenRepository,
)
from accounts.infrastructure.security import DjangoPasswordHasher, JWTTokenSigner
from licenses.application.handlers.activation_handlers import ActivateLicenseHandler, BindHwidHandler
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.application.handlers.license_admin_handlers import (
    DeactivateLicenseHandler,
    DeleteLicenseHandler,
    ReleaseLicenseHandler,
    UpdateLicenseHandler,
)
from licenses.application.handlers.license_query_handlers import (
    CheckLicenseHandler,
    DashboardStatsHandler,
    ListAllLicensesHandler,
    ListOwnLicensesHandler,
)
from licenses.domain.license_key import LicenseKeyGenerator
from licenses.infrastructure.repositories.django_license_repository import DjangoLicenseRepository
from products.application.handlers.catalog_handlers import (
    GetProductHandler,
    ListCatalogHandler,
    ListPurchasesHandler,
    PreviewPurchaseHandler,
)
from products.infrastructure.repositories.django_product_repository import DjangoProductRepository
from products.infrastructure.repositories.django_purchase_repository import DjangoPurchaseRepository

account_repository = DjangoAccountRepository()
token_repository = DjangoVerificationTokenRepository()
license_repository = DjangoLicenseRepository()
product_repository = DjangoProductRepository()
purchase_repository = DjangoPurchaseRepository()
password_hasher = DjangoPasswordHasher()


def token_signer() -> JWTTokenSigner:
    return JWTTokenSigner.from_settings()


def mailer() -> DjangoMailer:
    return DjangoMailer(from_email=settings.DEFAULT_FROM_EMAIL)


# Accounts


def authenticate_handler() -> AuthenticateHandler:
    return AuthenticateHandler(account_repository, token_signer())


def register_handler() -> RegisterAccountHandler:
    return RegisterAccountHandler(
        account_repository,
        password_hasher,
        mailer(),
        frontend_url=settings.FRONTEND_URL,
        confirmation_ttl=settings.EMAIL_CONFIRMATION_TTL,
    )


def confirm_email_handler() -> ConfirmEmailHandler:
    return ConfirmEmailHandler(account_repository, token_repository, token_signer())


def resend_confirmation_handler() -> ResendConfirmationHandler:
    return ResendConfirmationHandler(
        account_repository,
        token_repository,
        mailer(),
        frontend_url=settings.FRONTEND_URL,
        confirmation_ttl=settings.EMAIL_CONFIRMATION_TTL,
    )


def login_handler() -> LoginHandler:
    return LoginHandler(account_repository, password_hasher, token_signer())


def forgot_password_handler() -> ForgotPasswordHandler:
    return ForgotPasswordHandler(
        account_repository,
        token_repository,
        mailer(),
        frontend_url=settings.FRONTEND_URL,
        reset_ttl=settings.PASSWORD_RESET_TTL,
    )


def reset_password_handler() -> ResetPasswordHandler:
    return ResetPasswordHandler(account_repository, token_repository, password_hasher, token_signer())


def change_password_handler() -> ChangePasswordHandler:
    return ChangePasswordHandler(account_repository, password_hasher)


def current_user_handler() -> GetCurrentUserHandler:
    return GetCurrentUserHandler(account_repository)


def list_users_handler() -> ListUsersHandler:
    return ListUsersHandler(account_repository)


# Licenses


def issue_license_handler() -> IssueLicenseHandler:
    return IssueLicenseHandler(
        license_repository,
        account_repository,
        product_repository,
        key_generator=LicenseKeyGenerator(settings.LICENSE_KEY_SEGMENT_LENGTH),
        max_key_attempts=settings.LICENSE_KEY_MAX_ATTEMPTS,
    )


def activate_license_handler() -> ActivateLicenseHandler:
    return ActivateLicenseHandler(license_repository)


def bind_hwid_handler() -> BindHwidHandler:
    return BindHwidHandler(license_repository)


def update_license_handler() -> UpdateLicenseHandler:
    return UpdateLicenseHandler(license_repository, product_repository)


def deactivate_license_handler() -> DeactivateLicenseHandler:
    return DeactivateLicenseHandler(license_repository)


def release_license_handler() -> ReleaseLicenseHandler:
    return ReleaseLicenseHandler(license_repository)


def delete_license_handler() -> DeleteLicenseHandler:
    return DeleteLicenseHandler(license_repository)


def list_own_licenses_handler() -> ListOwnLicensesHandler:
    return ListOwnLicensesHandler(license_repository)


def list_all_licenses_handler() -> ListAllLicensesHandler:
    return ListAllLicensesHandler(license_repository)


def check_license_handler() -> CheckLicenseHandler:
    return CheckLicenseHandler(license_repository)


def dashboard_stats_handler() -> DashboardStatsHandler:
    return DashboardStatsHandler(account_repository, license_repository, purchase_repository)


# Catalog


def list_catalog_handler() -> ListCatalogHandler:
    return ListCatalogHandler(product_repository)


def get_product_handler() -> GetProductHandler:
    return GetProductHandler(product_repository)


def list_purchases_handler() -> ListPurchasesHandler:
    return ListPurchasesHandler(purchase_repository)


def preview_purchase_handler() -> PreviewPurchaseHandler:
    return PreviewPurchaseHandler(product_repository)
