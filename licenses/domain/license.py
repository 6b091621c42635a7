"""
License domain entity.

This is the core domain entity representing a license.
It contains business logic and is independent of infrastructure.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from core.domain.value_objects import DurationType


@dataclass(frozen=True)
class License:
    """
    License domain entity.

    Ownership, deactivation and expiry are independent: a license can be
    owned and deactivated, unowned and expired, and so on.
    """

    id: uuid.UUID
    license_key: str
    product_id: Optional[uuid.UUID]
    owner_id: Optional[uuid.UUID]
    issued_by: Optional[uuid.UUID]
    is_active: bool
    duration_type: Optional[DurationType]
    hwid: Optional[str]
    created_at: datetime
    activated_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate license entity."""
        if not self.license_key:
            raise ValueError("License key is required")

    @classmethod
    def create(
        cls,
        license_key: str,
        now: datetime,
        product_id: Optional[uuid.UUID] = None,
        duration_type: Optional[DurationType] = None,
        expires_at: Optional[datetime] = None,
        owner_id: Optional[uuid.UUID] = None,
        hwid: Optional[str] = None,
        issued_by: Optional[uuid.UUID] = None,
        license_id: Optional[uuid.UUID] = None,
    ) -> "License":
        """
        Create a new, active License entity.

        A license created with an owner counts as activated at creation.

        Returns:
            License entity instance
        """
        return cls(
            id=license_id or uuid.uuid4(),
            license_key=license_key,
            product_id=product_id,
            owner_id=owner_id,
            issued_by=issued_by,
            is_active=True,
            duration_type=duration_type,
            hwid=hwid or None,
            created_at=now,
            activated_at=now if owner_id else None,
            expires_at=expires_at,
        )

    @property
    def is_claimed(self) -> bool:
        """Check if some account owns the license."""
        return self.owner_id is not None

    def is_owned_by(self, user_id: uuid.UUID) -> bool:
        """Check if the given user owns the license."""
        return self.owner_id is not None and self.owner_id == user_id

    def hwid_matches(self, hwid: Optional[str]) -> Optional[bool]:
        """
        Compare a client fingerprint with the bound one.

        Returns:
            None when no HWID is bound, otherwise the exact-string comparison
        """
        if not self.hwid:
            return None
        return self.hwid == (hwid or "")


@dataclass(frozen=True)
class LicenseDetails:
    """Read model joining a license with owner and product information."""

    license: License
    owner_email: Optional[str] = None
    owner_display_name: Optional[str] = None
    product_name: Optional[str] = None
    product_slug: Optional[str] = None
    product_is_beta: Optional[bool] = None


@dataclass(frozen=True)
class LicenseSummary:
    """Aggregate license counters."""

    total: int
    active: int
