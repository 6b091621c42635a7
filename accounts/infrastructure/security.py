"""
Password hashing and session token adapters.
"""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password
from jose import JWTError, jwt

from accounts.ports.security import PasswordHasher, TokenSigner
from core.domain.exceptions import UnauthenticatedError


class DjangoPasswordHasher(PasswordHasher):
    """Hashes with the hashers configured in ``PASSWORD_HASHERS``."""

    def hash(self, raw_password: str) -> str:
        return make_password(raw_password)

    def verify(self, raw_password: str, password_hash: str) -> bool:
        return check_password(raw_password, password_hash)

    def burn(self, raw_password: str) -> None:
        make_password(raw_password)


class JWTTokenSigner(TokenSigner):
    """
    HS256 JSON Web Tokens with the user id as ``sub``.

    Stateless: nothing is stored server-side, so verification is a pure
    function of the secret, the claims and the clock.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", ttl: timedelta = timedelta(days=7)):
        if not secret:
            raise ValueError("Session token secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._ttl = ttl

    @classmethod
    def from_settings(cls) -> "JWTTokenSigner":
        """Build a signer from SESSION_TOKEN_* settings."""
        return cls(
            secret=settings.SESSION_TOKEN_SECRET,
            algorithm=settings.SESSION_TOKEN_ALGORITHM,
            ttl=settings.SESSION_TOKEN_TTL,
        )

    def issue(self, user_id: uuid.UUID, now: Optional[datetime] = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "sub": str(user_id),
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self._ttl).timestamp()),
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> uuid.UUID:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as e:
            raise UnauthenticatedError("Invalid or expired session token") from e

        try:
            return uuid.UUID(payload["sub"])
        except (KeyError, TypeError, ValueError) as e:
            raise UnauthenticatedError("Invalid or expired session token") from e
