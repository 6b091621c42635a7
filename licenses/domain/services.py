"""
License domain services.

Pure functions for expiry and status. Nothing here touches the store or
the clock: callers pass ``now`` in.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from core.domain.exceptions import InvalidFieldError
from core.domain.value_objects import DurationType, LicenseState
from licenses.domain.license import License


def compute_expiration(
    duration_type: Optional[DurationType],
    duration_days: Optional[int],
    now: datetime,
) -> Optional[datetime]:
    """
    Compute the expiration stamped on a newly issued license.

    Args:
        duration_type: Validity category, None for an untyped license
        duration_days: Explicit length; defaults to the type's standard length
        now: Issue time

    Returns:
        ``now + days`` or None for lifetime licenses and licenses with no length

    Raises:
        InvalidFieldError: If ``duration_days`` is not a positive number
    """
    if duration_type is DurationType.LIFETIME:
        return None

    days = duration_days
    if days is None and duration_type is not None:
        days = duration_type.default_days
    if days is None:
        return None
    if days < 1:
        raise InvalidFieldError("duration_days", "Duration must be at least one day")

    return now + timedelta(days=days)


@dataclass(frozen=True)
class LicenseStatus:
    """Evaluated state of a license at a point in time."""

    state: LicenseState
    is_lifetime: bool
    is_expired: bool
    remaining: Optional[timedelta]
    expires_at: Optional[datetime]

    @property
    def remaining_seconds(self) -> Optional[int]:
        if self.remaining is None:
            return None
        return int(self.remaining.total_seconds())


def evaluate_status(license: License, now: datetime) -> LicenseStatus:
    """
    Evaluate the displayed state of a license.

    Expiry is computed first: lifetime licenses and licenses without an
    expiration never expire. Deactivation then overrides only the
    displayed state; ``is_expired`` and ``remaining`` still reflect the
    underlying expiry.

    Args:
        license: License to evaluate
        now: Evaluation time

    Returns:
        LicenseStatus
    """
    is_lifetime = license.duration_type is DurationType.LIFETIME or license.expires_at is None

    if is_lifetime:
        state, is_expired, remaining = LicenseState.LIFETIME, False, None
    elif license.expires_at <= now:
        state, is_expired, remaining = LicenseState.EXPIRED, True, timedelta(0)
    else:
        state, is_expired, remaining = LicenseState.ACTIVE, False, license.expires_at - now

    if not license.is_active:
        state = LicenseState.DEACTIVATED

    return LicenseStatus(
        state=state,
        is_lifetime=is_lifetime,
        is_expired=is_expired,
        remaining=remaining,
        expires_at=None if license.duration_type is DurationType.LIFETIME else license.expires_at,
    )
