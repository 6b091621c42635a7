"""
IssueLicenseHandler.

Handles the issue license command.
"""

import logging

from accounts.ports.account_repository import AccountRepository
from core.domain.clock import Clock, utc_now
from core.domain.exceptions import (
    InvalidFieldError,
    LicenseKeyCollisionError,
    ProductNotFoundError,
    ServiceUnavailableError,
)
from core.domain.value_objects import Email
from core.infrastructure.events import event_bus
from core.metrics import license_key_collisions_total
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.dto.license_dto import IssuedLicenseDTO
from licenses.domain.events import LicenseIssued
from licenses.domain.license import License
from licenses.domain.license_key import LicenseKeyGenerator
from licenses.domain.services import compute_expiration
from licenses.ports.license_repository import LicenseRepository
from products.ports.product_repository import ProductRepository

logger = logging.getLogger(__name__)

DEFAULT_MAX_KEY_ATTEMPTS = 5


class IssueLicenseHandler:
    """Handler for IssueLicenseCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        account_repository: AccountRepository,
        product_repository: ProductRepository,
        key_generator: LicenseKeyGenerator,
        max_key_attempts: int = DEFAULT_MAX_KEY_ATTEMPTS,
        clock: Clock = utc_now,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.account_repository = account_repository
        self.product_repository = product_repository
        self.key_generator = key_generator
        self.max_key_attempts = max_key_attempts
        self.clock = clock

    async def handle(self, command: IssueLicenseCommand) -> IssuedLicenseDTO:
        """
        Handle issue license command.

        Args:
            command: IssueLicenseCommand

        Returns:
            IssuedLicenseDTO with id, key and expiry

        Raises:
            ProductNotFoundError: If the product does not exist
            InvalidFieldError: If the owner email or duration is malformed
            ServiceUnavailableError: If no unique key could be allocated
        """
        if command.product_id is not None:
            if await self.product_repository.find_by_id(command.product_id) is None:
                raise ProductNotFoundError(f"Product {command.product_id} not found")

        owner_id = None
        if command.owner_email:
            try:
                email = Email(command.owner_email)
            except ValueError as e:
                raise InvalidFieldError("owner_email", "Enter a valid email address") from e
            owner = await self.account_repository.find_by_email(email)
            if owner is None:
                logger.warning("Owner email not registered, issuing an unclaimed license")
            else:
                owner_id = owner.id

        now = self.clock()
        expires_at = compute_expiration(command.duration_type, command.duration_days, now)

        saved = None
        for attempt in range(1, self.max_key_attempts + 1):
            candidate = License.create(
                license_key=self.key_generator.generate(),
                now=now,
                product_id=command.product_id,
                duration_type=command.duration_type,
                expires_at=expires_at,
                owner_id=owner_id,
                hwid=command.hwid,
                issued_by=command.issued_by,
            )
            try:
                saved = await self.license_repository.add(candidate)
                break
            except LicenseKeyCollisionError:
                license_key_collisions_total.inc()
                logger.warning("License key collision", extra={"attempt": attempt})

        if saved is None:
            logger.error("Gave up allocating a license key after %d attempts", self.max_key_attempts)
            raise ServiceUnavailableError("Could not allocate a unique license key")

        await event_bus.publish(
            LicenseIssued(
                license_id=saved.id,
                product_id=saved.product_id,
                owner_id=saved.owner_id,
                duration_type=saved.duration_type.value if saved.duration_type else None,
                issued_by=command.issued_by,
            )
        )

        return IssuedLicenseDTO(
            id=saved.id,
            license_key=saved.license_key,
            expires_at=saved.expires_at,
            owner_id=saved.owner_id,
        )
