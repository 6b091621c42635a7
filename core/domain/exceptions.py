"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""
from typing import Optional


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class InvalidFieldError(DomainException):
    """Raised when a request field carries an unacceptable value."""

    def __init__(self, field: str, message: str):
        super().__init__(message, code="INVALID_FIELD")
        self.field = field


class NotFoundError(DomainException):
    """Base exception for lookups that resolve to nothing."""

    def __init__(self, message: str = "Not found", code: str = "NOT_FOUND"):
        super().__init__(message, code=code)


class ServiceUnavailableError(DomainException):
    """Raised when the store or the mailer cannot serve the request."""

    def __init__(self, message: str = "Service temporarily unavailable"):
        super().__init__(message, code="UNAVAILABLE")


class AccountException(DomainException):
    """Base exception for account-related errors."""

    pass


class DuplicateEmailError(AccountException):
    """Raised when registering an email that already has an account."""

    def __init__(self, message: str = "An account with this email already exists"):
        super().__init__(message, code="DUPLICATE_EMAIL")


class InvalidCredentialsError(AccountException):
    """Raised when an email/password pair does not verify.

    The message is the same for unknown emails and wrong passwords.
    """

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class EmailNotConfirmedError(AccountException):
    """Raised on login before the email address was confirmed."""

    def __init__(self, message: str = "Email address is not confirmed"):
        super().__init__(message, code="EMAIL_NOT_CONFIRMED")


class InvalidOrExpiredTokenError(AccountException):
    """Raised when a confirmation or reset token is unknown, expired or used."""

    def __init__(self, message: str = "Token is invalid or has expired"):
        super().__init__(message, code="INVALID_OR_EXPIRED_TOKEN")


class AlreadyConfirmedError(AccountException):
    """Raised when resending a confirmation for a confirmed account."""

    def __init__(self, message: str = "Email address is already confirmed"):
        super().__init__(message, code="ALREADY_CONFIRMED")


class AccountNotFoundError(NotFoundError):
    """Raised when no account matches the given email."""

    def __init__(self, message: str = "Account not found"):
        super().__init__(message)


class UnauthenticatedError(AccountException):
    """Raised when a request carries no valid session token."""

    def __init__(self, message: str = "Authentication required", code: str = "UNAUTHENTICATED"):
        super().__init__(message, code=code)


class UserNotFoundError(UnauthenticatedError):
    """Raised when a valid session token names a user that no longer exists."""

    def __init__(self, message: str = "User not found"):
        super().__init__(message, code="USER_NOT_FOUND")


class ForbiddenError(AccountException):
    """Raised when an authenticated user lacks the admin role."""

    def __init__(self, message: str = "Administrator privileges required"):
        super().__init__(message, code="FORBIDDEN")


class LicenseException(DomainException):
    """Base exception for license-related errors."""

    pass


class LicenseNotFoundError(NotFoundError):
    """Raised when a license is not found."""

    def __init__(self, message: str = "License not found"):
        super().__init__(message)


class AlreadyOwnedByOtherError(LicenseException):
    """Raised when activating a license another account already owns."""

    def __init__(self, message: str = "License is already activated by another user"):
        super().__init__(message, code="ALREADY_OWNED_BY_OTHER")


class LicenseDeactivatedError(LicenseException):
    """Raised when activating a license an administrator deactivated."""

    def __init__(self, message: str = "License is deactivated"):
        super().__init__(message, code="DEACTIVATED")


class NoFieldsProvidedError(LicenseException):
    """Raised when an update request carries no fields."""

    def __init__(self, message: str = "No fields provided for update"):
        super().__init__(message, code="NO_FIELDS_PROVIDED")


class LicenseKeyCollisionError(LicenseException):
    """Raised by the store when a generated key is already taken."""

    def __init__(self, license_key: Optional[str] = None):
        super().__init__("License key already exists", code="LICENSE_KEY_COLLISION")
        self.license_key = license_key


class ProductNotFoundError(NotFoundError):
    """Raised when a product is not found."""

    def __init__(self, message: str = "Product not found"):
        super().__init__(message)


class PricingTierNotFoundError(NotFoundError):
    """Raised when a pricing tier is not found."""

    def __init__(self, message: str = "Pricing tier not found"):
        super().__init__(message)
