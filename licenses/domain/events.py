"""
License domain events.

Domain events represent something that happened in the license domain.
"""

import uuid
from datetime import datetime
from typing import Iterable, Optional

from core.domain.events import DomainEvent


class LicenseIssued(DomainEvent):
    """Event raised when an administrator issues a license."""

    def __init__(
        self,
        license_id: uuid.UUID,
        product_id: Optional[uuid.UUID],
        owner_id: Optional[uuid.UUID],
        duration_type: Optional[str],
        issued_by: Optional[uuid.UUID],
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseIssued event.

        Args:
            license_id: License UUID
            product_id: Product UUID, if any
            owner_id: Owner resolved at issuance, if any
            duration_type: Duration type value, if any
            issued_by: Issuing administrator
            occurred_at: When the event occurred
        """
        super().__init__(license_id, occurred_at)
        self.license_id = license_id
        self.product_id = product_id
        self.owner_id = owner_id
        self.duration_type = duration_type
        self.issued_by = issued_by


class LicenseActivated(DomainEvent):
    """Event raised when a user claims an unowned license."""

    def __init__(self, license_id: uuid.UUID, owner_id: uuid.UUID, occurred_at: Optional[datetime] = None):
        super().__init__(license_id, occurred_at)
        self.license_id = license_id
        self.owner_id = owner_id


class LicenseHwidBound(DomainEvent):
    """Event raised when an owner binds or clears a hardware fingerprint."""

    def __init__(
        self,
        license_id: uuid.UUID,
        owner_id: uuid.UUID,
        cleared: bool,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(license_id, occurred_at)
        self.license_id = license_id
        self.owner_id = owner_id
        self.cleared = cleared


class LicenseUpdated(DomainEvent):
    """Event raised when an administrator patches a license."""

    def __init__(
        self,
        license_id: uuid.UUID,
        fields: Iterable[str],
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(license_id, occurred_at)
        self.license_id = license_id
        self.fields = sorted(fields)


class LicenseDeactivated(DomainEvent):
    """Event raised when an administrator deactivates a license."""

    def __init__(self, license_id: uuid.UUID, occurred_at: Optional[datetime] = None):
        super().__init__(license_id, occurred_at)
        self.license_id = license_id


class LicenseReleased(DomainEvent):
    """Event raised when an administrator clears a license's owner."""

    def __init__(
        self,
        license_id: uuid.UUID,
        previous_owner_id: Optional[uuid.UUID],
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(license_id, occurred_at)
        self.license_id = license_id
        self.previous_owner_id = previous_owner_id


class LicenseDeleted(DomainEvent):
    """Event raised when an administrator deletes a license."""

    def __init__(self, license_id: uuid.UUID, occurred_at: Optional[datetime] = None):
        super().__init__(license_id, occurred_at)
        self.license_id = license_id
