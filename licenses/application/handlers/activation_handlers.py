"""
Activation and HWID binding handlers.
"""

import logging

from core.domain.clock import Clock, utc_now
from core.domain.exceptions import (
    AlreadyOwnedByOtherError,
    InvalidFieldError,
    LicenseDeactivatedError,
    LicenseNotFoundError,
)
from core.infrastructure.events import event_bus
from licenses.application.commands.activate_license import ActivateLicenseCommand, BindHwidCommand
from licenses.application.dto.license_dto import ActivationResultDTO, LicenseDTO
from licenses.domain.events import LicenseActivated, LicenseHwidBound
from licenses.domain.license import License
from licenses.domain.license_key import is_well_formed_key, normalize_license_key
from licenses.domain.services import evaluate_status
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


class ActivateLicenseHandler:
    """Handler for ActivateLicenseCommand."""

    def __init__(self, license_repository: LicenseRepository, clock: Clock = utc_now):
        self.license_repository = license_repository
        self.clock = clock

    def _result(self, license: License, already_owned: bool) -> ActivationResultDTO:
        return ActivationResultDTO(
            message="License already activated" if already_owned else "License activated",
            already_owned=already_owned,
            license=LicenseDTO.build(license, evaluate_status(license, self.clock())),
        )

    async def handle(self, command: ActivateLicenseCommand) -> ActivationResultDTO:
        """
        Claim a license for the user.

        Re-activating a license the user already owns succeeds without
        writing. A first claim is a compare-and-set on the owner column;
        the loser of a race re-reads and gets the error matching what it
        finds.

        Raises:
            LicenseNotFoundError: No license has this key
            AlreadyOwnedByOtherError: Another user owns the license
            LicenseDeactivatedError: The license is deactivated
        """
        key = normalize_license_key(command.license_key)
        if not key:
            raise InvalidFieldError("license_key", "License key is required")
        if not is_well_formed_key(key):
            raise LicenseNotFoundError()

        license = await self.license_repository.find_by_key(key)
        if license is None:
            raise LicenseNotFoundError()

        self._check_claimable(license, command)
        if license.is_owned_by(command.user_id):
            return self._result(license, already_owned=True)

        now = self.clock()
        if not await self.license_repository.claim(license.id, command.user_id, now):
            current = await self.license_repository.find_by_id(license.id)
            if current is None:
                raise LicenseNotFoundError()
            self._check_claimable(current, command)
            if current.is_owned_by(command.user_id):
                return self._result(current, already_owned=True)
            raise AlreadyOwnedByOtherError()

        logger.info(
            "License activated",
            extra={"license_id": str(license.id), "user_id": str(command.user_id)},
        )
        await event_bus.publish(LicenseActivated(license_id=license.id, owner_id=command.user_id))

        claimed = await self.license_repository.find_by_id(license.id)
        return self._result(claimed or license, already_owned=False)

    @staticmethod
    def _check_claimable(license: License, command: ActivateLicenseCommand) -> None:
        if license.owner_id is not None and not license.is_owned_by(command.user_id):
            raise AlreadyOwnedByOtherError()
        if not license.is_active:
            raise LicenseDeactivatedError()


class BindHwidHandler:
    """Handler for BindHwidCommand."""

    def __init__(self, license_repository: LicenseRepository, clock: Clock = utc_now):
        self.license_repository = license_repository
        self.clock = clock

    async def handle(self, command: BindHwidCommand) -> LicenseDTO:
        """
        Overwrite the HWID of a license the user owns.

        Raises:
            LicenseNotFoundError: The license does not exist or belongs to someone else
        """
        hwid = command.hwid or None
        if not await self.license_repository.set_hwid(command.license_id, command.user_id, hwid):
            raise LicenseNotFoundError()

        await event_bus.publish(
            LicenseHwidBound(
                license_id=command.license_id,
                owner_id=command.user_id,
                cleared=hwid is None,
            )
        )

        license = await self.license_repository.find_by_id(command.license_id)
        if license is None:
            raise LicenseNotFoundError()
        return LicenseDTO.build(license, evaluate_status(license, self.clock()))
