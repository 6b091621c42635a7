"""
Django ORM implementation of VerificationTokenRepository.
"""
from typing import Optional

from asgiref.sync import sync_to_async
from django.db import transaction

from accounts.domain.tokens import EmailConfirmationToken, PasswordResetToken
from accounts.infrastructure.models import EmailConfirmationToken as ConfirmationTokenModel
from accounts.infrastructure.models import PasswordResetToken as ResetTokenModel
from accounts.ports.verification_token_repository import VerificationTokenRepository
from core.infrastructure.database import translate_store_errors


class DjangoVerificationTokenRepository(VerificationTokenRepository):
    """Django ORM implementation of VerificationTokenRepository."""

    @sync_to_async
    @translate_store_errors
    def replace_confirmation_token(self, token: EmailConfirmationToken) -> None:
        """Delete previous confirmation tokens of the user and insert this one."""
        with transaction.atomic():
            ConfirmationTokenModel.objects.filter(user_id=token.user_id).delete()
            ConfirmationTokenModel.objects.create(
                id=token.id,
                user_id=token.user_id,
                token_hash=token.token_hash,
                expires_at=token.expires_at,
                created_at=token.created_at,
            )

    @sync_to_async
    @translate_store_errors
    def find_confirmation_token(self, token_hash: str) -> Optional[EmailConfirmationToken]:
        """Find a confirmation token by hash."""
        model = ConfirmationTokenModel.objects.filter(token_hash=token_hash).first()
        if model is None:
            return None
        return EmailConfirmationToken(
            id=model.id,
            user_id=model.user_id,
            token_hash=model.token_hash,
            expires_at=model.expires_at,
            created_at=model.created_at,
        )

    @sync_to_async
    @translate_store_errors
    def replace_reset_token(self, token: PasswordResetToken) -> None:
        """Delete previous reset tokens of the user and insert this one."""
        with transaction.atomic():
            ResetTokenModel.objects.filter(user_id=token.user_id).delete()
            ResetTokenModel.objects.create(
                id=token.id,
                user_id=token.user_id,
                token_hash=token.token_hash,
                expires_at=token.expires_at,
                used=token.used,
                created_at=token.created_at,
            )

    @sync_to_async
    @translate_store_errors
    def find_reset_token(self, token_hash: str) -> Optional[PasswordResetToken]:
        """Find a reset token by hash."""
        model = ResetTokenModel.objects.filter(token_hash=token_hash).first()
        if model is None:
            return None
        return PasswordResetToken(
            id=model.id,
            user_id=model.user_id,
            token_hash=model.token_hash,
            expires_at=model.expires_at,
            used=model.used,
            created_at=model.created_at,
        )
