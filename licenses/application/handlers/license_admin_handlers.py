"""
Administrative license handlers: update, deactivate, release and delete.

Deactivation and deletion are separate actions. Deactivation is
reversible (patch ``is_active`` back to true); deletion is not.
"""

import logging

from core.domain.clock import Clock, utc_now
from core.domain.exceptions import (
    InvalidFieldError,
    LicenseNotFoundError,
    NoFieldsProvidedError,
    ProductNotFoundError,
)
from core.domain.value_objects import DurationType
from core.infrastructure.events import event_bus
from licenses.application.commands.admin_license_commands import (
    DeactivateLicenseCommand,
    DeleteLicenseCommand,
    ReleaseLicenseCommand,
    UpdateLicenseCommand,
)
from licenses.application.dto.license_dto import LicenseDTO
from licenses.domain.events import (
    LicenseDeactivated,
    LicenseDeleted,
    LicenseReleased,
    LicenseUpdated,
)
from licenses.domain.license import License
from licenses.domain.services import evaluate_status
from licenses.ports.license_repository import UPDATABLE_FIELDS, LicenseRepository
from products.ports.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class _LicenseAdminHandler:
    """Shared lookup and response building."""

    def __init__(self, license_repository: LicenseRepository, clock: Clock = utc_now):
        self.license_repository = license_repository
        self.clock = clock

    async def _get(self, license_id) -> License:
        license = await self.license_repository.find_by_id(license_id)
        if license is None:
            raise LicenseNotFoundError()
        return license

    def _dto(self, license: License) -> LicenseDTO:
        return LicenseDTO.build(license, evaluate_status(license, self.clock()))


class UpdateLicenseHandler(_LicenseAdminHandler):
    """Handler for UpdateLicenseCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        product_repository: ProductRepository,
        clock: Clock = utc_now,
    ):
        super().__init__(license_repository, clock)
        self.product_repository = product_repository

    async def handle(self, command: UpdateLicenseCommand) -> LicenseDTO:
        """
        Apply a sparse patch.

        Switching to ``lifetime`` clears ``expires_at``; a license that is
        (and stays) lifetime cannot be given an expiration.

        Raises:
            NoFieldsProvidedError: Empty patch
            InvalidFieldError: Unknown field or contradictory values
            LicenseNotFoundError: Unknown license
            ProductNotFoundError: ``product_id`` names no product
        """
        changes = dict(command.changes)
        if not changes:
            raise NoFieldsProvidedError()

        for field_name in changes:
            if field_name not in UPDATABLE_FIELDS:
                raise InvalidFieldError(field_name, "This field cannot be updated")

        license = await self._get(command.license_id)

        product_id = changes.get("product_id")
        if product_id is not None and await self.product_repository.find_by_id(product_id) is None:
            raise ProductNotFoundError(f"Product {product_id} not found")

        if "hwid" in changes:
            changes["hwid"] = changes["hwid"] or None

        duration_type = changes.get("duration_type", license.duration_type)
        if duration_type is DurationType.LIFETIME:
            if changes.get("expires_at") is not None:
                raise InvalidFieldError("expires_at", "Lifetime licenses cannot have an expiration date")
            if "duration_type" in changes:
                changes["expires_at"] = None

        if not await self.license_repository.update_fields(license.id, changes):
            raise LicenseNotFoundError()

        logger.info(
            "License updated",
            extra={"license_id": str(license.id), "fields": sorted(changes)},
        )
        await event_bus.publish(LicenseUpdated(license_id=license.id, fields=changes.keys()))
        return self._dto(await self._get(license.id))


class DeactivateLicenseHandler(_LicenseAdminHandler):
    """Handler for DeactivateLicenseCommand."""

    async def handle(self, command: DeactivateLicenseCommand) -> LicenseDTO:
        """
        Flip ``is_active`` to false. Owner and expiry are untouched.

        Raises:
            LicenseNotFoundError: Unknown license
        """
        license = await self._get(command.license_id)
        if not await self.license_repository.update_fields(license.id, {"is_active": False}):
            raise LicenseNotFoundError()

        await event_bus.publish(LicenseDeactivated(license_id=license.id))
        return self._dto(await self._get(license.id))


class ReleaseLicenseHandler(_LicenseAdminHandler):
    """Handler for ReleaseLicenseCommand."""

    async def handle(self, command: ReleaseLicenseCommand) -> LicenseDTO:
        """
        Clear owner, activation time and HWID so the key can be activated again.

        Raises:
            LicenseNotFoundError: Unknown license
        """
        license = await self._get(command.license_id)
        if not await self.license_repository.release(license.id):
            raise LicenseNotFoundError()

        await event_bus.publish(
            LicenseReleased(license_id=license.id, previous_owner_id=license.owner_id)
        )
        return self._dto(await self._get(license.id))


class DeleteLicenseHandler(_LicenseAdminHandler):
    """Handler for DeleteLicenseCommand."""

    async def handle(self, command: DeleteLicenseCommand) -> None:
        """
        Remove the license row.

        Raises:
            LicenseNotFoundError: Unknown license
        """
        if not await self.license_repository.delete(command.license_id):
            raise LicenseNotFoundError()

        logger.info("License deleted", extra={"license_id": str(command.license_id)})
        await event_bus.publish(LicenseDeleted(license_id=command.license_id))
