"""
Django ORM implementation of AccountRepository.
"""
import logging
import uuid
from typing import FrozenSet, Iterable, List, Optional

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction

from accounts.domain.tokens import EmailConfirmationToken
from accounts.domain.user import Profile, User, UserAccount
from accounts.infrastructure.models import EmailConfirmationToken as TokenModel
from accounts.infrastructure.models import PasswordResetToken as ResetTokenModel
from accounts.infrastructure.models import Profile as ProfileModel
from accounts.infrastructure.models import User as UserModel
from accounts.infrastructure.models import UserRole as UserRoleModel
from accounts.ports.account_repository import AccountRepository
from core.domain.exceptions import DuplicateEmailError
from core.domain.value_objects import Email, Role
from core.infrastructure.database import translate_store_errors

logger = logging.getLogger(__name__)


class DjangoAccountRepository(AccountRepository):
    """
    Django ORM implementation of AccountRepository.

    Converts between domain entities and Django models.
    """

    @staticmethod
    def _to_domain(model: UserModel) -> User:
        """Convert Django model to domain entity."""
        return User(
            id=model.id,
            email=Email(model.email),
            password_hash=model.password_hash,
            email_confirmed=model.email_confirmed,
            created_at=model.created_at,
        )

    @staticmethod
    def _profile_to_domain(model: ProfileModel) -> Profile:
        return Profile(
            user_id=model.user_id,
            display_name=model.display_name,
            avatar_url=model.avatar_url,
            created_at=model.created_at,
        )

    @sync_to_async
    @translate_store_errors
    def find_by_email(self, email: Email) -> Optional[User]:
        """Find a user by normalized email."""
        model = UserModel.objects.filter(email=email.value).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    @translate_store_errors
    def find_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        """Find a user by ID."""
        model = UserModel.objects.filter(id=user_id).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    @translate_store_errors
    def get_profile(self, user_id: uuid.UUID) -> Optional[Profile]:
        """Return the profile of a user."""
        model = ProfileModel.objects.filter(user_id=user_id).first()
        return self._profile_to_domain(model) if model else None

    @sync_to_async
    @translate_store_errors
    def get_roles(self, user_id: uuid.UUID) -> FrozenSet[Role]:
        """Return the user's roles."""
        values = UserRoleModel.objects.filter(user_id=user_id).values_list("role", flat=True)
        return frozenset(Role(value) for value in values)

    @sync_to_async
    @translate_store_errors
    def has_role(self, user_id: uuid.UUID, role: Role) -> bool:
        """Check a role with a fresh query."""
        return UserRoleModel.objects.filter(user_id=user_id, role=role.value).exists()

    @sync_to_async
    @translate_store_errors
    def create_account(
        self,
        user: User,
        profile: Profile,
        roles: Iterable[Role],
        confirmation_token: EmailConfirmationToken,
    ) -> User:
        """Persist user, profile, roles and the first token in one transaction."""
        try:
            with transaction.atomic():
                model = UserModel.objects.create(
                    id=user.id,
                    email=user.email.value,
                    password_hash=user.password_hash,
                    email_confirmed=user.email_confirmed,
                    created_at=user.created_at,
                )
                ProfileModel.objects.create(
                    user=model,
                    display_name=profile.display_name,
                    avatar_url=profile.avatar_url,
                    created_at=profile.created_at,
                )
                UserRoleModel.objects.bulk_create(
                    [UserRoleModel(user=model, role=role.value) for role in roles]
                )
                TokenModel.objects.create(
                    id=confirmation_token.id,
                    user=model,
                    token_hash=confirmation_token.token_hash,
                    expires_at=confirmation_token.expires_at,
                    created_at=confirmation_token.created_at,
                )
        except IntegrityError as e:
            logger.info("Registration rejected by unique constraint: %s", e)
            raise DuplicateEmailError() from e
        return self._to_domain(model)

    @sync_to_async
    @translate_store_errors
    def confirm_email(self, token_id: uuid.UUID, user_id: uuid.UUID) -> bool:
        """Delete the token and confirm the user, or do nothing if already consumed."""
        with transaction.atomic():
            deleted, _ = TokenModel.objects.filter(id=token_id, user_id=user_id).delete()
            if not deleted:
                return False
            UserModel.objects.filter(id=user_id).update(email_confirmed=True)
        return True

    @sync_to_async
    @translate_store_errors
    def reset_password(self, token_id: uuid.UUID, user_id: uuid.UUID, password_hash: str) -> bool:
        """Flip the token to used and store the new hash, or do nothing if already used."""
        with transaction.atomic():
            claimed = ResetTokenModel.objects.filter(
                id=token_id, user_id=user_id, used=False
            ).update(used=True)
            if not claimed:
                return False
            UserModel.objects.filter(id=user_id).update(password_hash=password_hash)
        return True

    @sync_to_async
    @translate_store_errors
    def update_password(self, user_id: uuid.UUID, password_hash: str) -> None:
        """Replace the stored hash."""
        UserModel.objects.filter(id=user_id).update(password_hash=password_hash)

    @sync_to_async
    @translate_store_errors
    def grant_role(self, user_id: uuid.UUID, role: Role) -> bool:
        """Grant a role if missing."""
        _, created = UserRoleModel.objects.get_or_create(user_id=user_id, role=role.value)
        return created

    @sync_to_async
    @translate_store_errors
    def revoke_role(self, user_id: uuid.UUID, role: Role) -> bool:
        """Revoke a role if present."""
        deleted, _ = UserRoleModel.objects.filter(user_id=user_id, role=role.value).delete()
        return deleted > 0

    @sync_to_async
    @translate_store_errors
    def list_accounts(self) -> List[UserAccount]:
        """List accounts with profile and roles, newest first."""
        queryset = (
            UserModel.objects.select_related("profile")
            .prefetch_related("roles")
            .order_by("-created_at")
        )
        accounts = []
        for model in queryset:
            profile = getattr(model, "profile", None)
            accounts.append(
                UserAccount(
                    user=self._to_domain(model),
                    profile=self._profile_to_domain(profile) if profile else None,
                    roles=frozenset(Role(r.role) for r in model.roles.all()),
                )
            )
        return accounts

    @sync_to_async
    @translate_store_errors
    def count_users(self) -> int:
        """Count registered users."""
        return UserModel.objects.count()
