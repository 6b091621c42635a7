"""
License repository port (interface).

This defines the contract for license persistence operations.
Implementations are in the infrastructure layer.
"""
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, List, Mapping, Optional

from licenses.domain.license import License, LicenseDetails, LicenseSummary

UPDATABLE_FIELDS = frozenset({"is_active", "expires_at", "hwid", "product_id", "duration_type"})


class LicenseRepository(ABC):
    """
    Abstract repository for License entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def add(self, license: License) -> License:
        """
        Insert a new license.

        Args:
            license: License entity to insert

        Returns:
            Saved license entity

        Raises:
            LicenseKeyCollisionError: If the key is already taken
        """
        pass

    @abstractmethod
    async def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        """
        Find a license by ID.

        Args:
            license_id: License UUID

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_key(self, license_key: str) -> Optional[License]:
        """
        Find a license by its normalized key.

        Args:
            license_key: Upper-case license key

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def claim(self, license_id: uuid.UUID, owner_id: uuid.UUID, activated_at: datetime) -> bool:
        """
        Set the owner of an unowned, active license.

        This is a compare-and-set: it only writes when the license has no
        owner and is active at the moment of the update.

        Returns:
            True if this call claimed the license
        """
        pass

    @abstractmethod
    async def set_hwid(self, license_id: uuid.UUID, owner_id: uuid.UUID, hwid: Optional[str]) -> bool:
        """
        Overwrite the HWID of a license owned by ``owner_id``.

        Returns:
            False if the license does not exist or has another owner
        """
        pass

    @abstractmethod
    async def update_fields(self, license_id: uuid.UUID, changes: Mapping[str, Any]) -> bool:
        """
        Sparse update of the given fields.

        Args:
            license_id: License UUID
            changes: Subset of UPDATABLE_FIELDS mapped to new values

        Returns:
            False if the license does not exist
        """
        pass

    @abstractmethod
    async def release(self, license_id: uuid.UUID) -> bool:
        """Clear owner, activation time and HWID. False if the license does not exist."""
        pass

    @abstractmethod
    async def delete(self, license_id: uuid.UUID) -> bool:
        """Delete a license permanently. False if it does not exist."""
        pass

    @abstractmethod
    async def list_for_owner(self, owner_id: uuid.UUID) -> List[LicenseDetails]:
        """List licenses owned by a user with product details, newest first."""
        pass

    @abstractmethod
    async def list_all(self) -> List[LicenseDetails]:
        """List every license with owner and product details, newest first."""
        pass

    @abstractmethod
    async def count_summary(self) -> LicenseSummary:
        """Count all licenses and active licenses."""
        pass
