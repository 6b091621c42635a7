"""
License DTOs for API responses.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from licenses.domain.license import License, LicenseDetails
from licenses.domain.services import LicenseStatus


@dataclass
class LicenseDTO:
    """DTO for license information with its evaluated status."""

    id: uuid.UUID
    license_key: str
    product_id: Optional[uuid.UUID]
    owner_id: Optional[uuid.UUID]
    issued_by: Optional[uuid.UUID]
    is_active: bool
    duration_type: Optional[str]
    hwid: Optional[str]
    created_at: datetime
    activated_at: Optional[datetime]
    expires_at: Optional[datetime]
    status: str
    is_expired: bool
    is_lifetime: bool
    remaining_seconds: Optional[int]
    product_name: Optional[str] = None
    product_slug: Optional[str] = None
    product_is_beta: Optional[bool] = None
    owner_email: Optional[str] = None
    owner_display_name: Optional[str] = None

    @classmethod
    def build(
        cls,
        license: License,
        status: LicenseStatus,
        details: Optional[LicenseDetails] = None,
    ) -> "LicenseDTO":
        """Combine an entity, its status and optional joined details."""
        return cls(
            id=license.id,
            license_key=license.license_key,
            product_id=license.product_id,
            owner_id=license.owner_id,
            issued_by=license.issued_by,
            is_active=license.is_active,
            duration_type=license.duration_type.value if license.duration_type else None,
            hwid=license.hwid,
            created_at=license.created_at,
            activated_at=license.activated_at,
            expires_at=license.expires_at,
            status=status.state.value,
            is_expired=status.is_expired,
            is_lifetime=status.is_lifetime,
            remaining_seconds=status.remaining_seconds,
            product_name=details.product_name if details else None,
            product_slug=details.product_slug if details else None,
            product_is_beta=details.product_is_beta if details else None,
            owner_email=details.owner_email if details else None,
            owner_display_name=details.owner_display_name if details else None,
        )


@dataclass
class IssuedLicenseDTO:
    """DTO for a freshly issued license."""

    id: uuid.UUID
    license_key: str
    expires_at: Optional[datetime]
    owner_id: Optional[uuid.UUID]


@dataclass
class ActivationResultDTO:
    """DTO for an activation; ``already_owned`` marks the idempotent case."""

    message: str
    already_owned: bool
    license: LicenseDTO


@dataclass
class LicenseCheckDTO:
    """DTO answering a client add-on license check."""

    license_key: str
    valid: bool
    status: str
    is_expired: bool
    is_lifetime: bool
    expires_at: Optional[datetime]
    remaining_seconds: Optional[int]
    is_claimed: bool
    hwid_bound: bool
    hwid_match: Optional[bool]


@dataclass
class DashboardStatsDTO:
    """DTO for the admin dashboard counters."""

    users: int
    licenses: int
    active_licenses: int
    purchases: int
    revenue: Decimal
