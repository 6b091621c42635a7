"""
Helpers shared by the account handlers.
"""
from accounts.application.dto.account_dto import SessionDTO, UserDTO
from accounts.domain.user import User, UserAccount
from accounts.ports.account_repository import AccountRepository
from accounts.ports.security import TokenSigner
from core.domain.exceptions import InvalidFieldError
from core.domain.value_objects import Email


def parse_email(raw: str) -> Email:
    """
    Normalize an email or fail with a field-level validation error.

    Raises:
        InvalidFieldError: If the address is malformed
    """
    try:
        return Email(raw)
    except ValueError as e:
        raise InvalidFieldError("email", "Enter a valid email address") from e


async def load_account(account_repository: AccountRepository, user: User) -> UserAccount:
    """Join a user with its profile and roles."""
    profile = await account_repository.get_profile(user.id)
    roles = await account_repository.get_roles(user.id)
    return UserAccount(user=user, profile=profile, roles=roles)


async def issue_session(
    account_repository: AccountRepository, token_signer: TokenSigner, user: User
) -> SessionDTO:
    """Build the session payload returned by login, confirmation and reset."""
    account = await load_account(account_repository, user)
    return SessionDTO(user=UserDTO.from_account(account), token=token_signer.issue(user.id))
