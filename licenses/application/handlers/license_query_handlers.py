"""
License read handlers: listings, client checks and dashboard counters.
"""

from typing import List

from accounts.ports.account_repository import AccountRepository
from core.domain.clock import Clock, utc_now
from core.domain.exceptions import InvalidFieldError, LicenseNotFoundError
from core.domain.value_objects import LicenseState
from licenses.application.dto.license_dto import DashboardStatsDTO, LicenseCheckDTO, LicenseDTO
from licenses.application.queries.check_license import CheckLicenseQuery
from licenses.application.queries.dashboard_stats import DashboardStatsQuery
from licenses.application.queries.list_licenses import ListAllLicensesQuery, ListOwnLicensesQuery
from licenses.domain.license_key import is_well_formed_key, normalize_license_key
from licenses.domain.services import evaluate_status
from licenses.ports.license_repository import LicenseRepository
from products.ports.purchase_repository import PurchaseRepository


class ListOwnLicensesHandler:
    """Handler for ListOwnLicensesQuery."""

    def __init__(self, license_repository: LicenseRepository, clock: Clock = utc_now):
        self.license_repository = license_repository
        self.clock = clock

    async def handle(self, query: ListOwnLicensesQuery) -> List[LicenseDTO]:
        """Return the user's licenses with product details, newest first."""
        now = self.clock()
        details = await self.license_repository.list_for_owner(query.user_id)
        return [LicenseDTO.build(d.license, evaluate_status(d.license, now), d) for d in details]


class ListAllLicensesHandler:
    """Handler for ListAllLicensesQuery."""

    def __init__(self, license_repository: LicenseRepository, clock: Clock = utc_now):
        self.license_repository = license_repository
        self.clock = clock

    async def handle(self, query: ListAllLicensesQuery) -> List[LicenseDTO]:
        """Return every license with owner and product details, newest first."""
        now = self.clock()
        details = await self.license_repository.list_all()
        return [LicenseDTO.build(d.license, evaluate_status(d.license, now), d) for d in details]


class CheckLicenseHandler:
    """Handler for CheckLicenseQuery."""

    def __init__(self, license_repository: LicenseRepository, clock: Clock = utc_now):
        self.license_repository = license_repository
        self.clock = clock

    async def handle(self, query: CheckLicenseQuery) -> LicenseCheckDTO:
        """
        Evaluate a key for the client add-on.

        A license is valid when it is claimed, active, not expired and,
        if a HWID is bound, the supplied one matches exactly.

        Raises:
            LicenseNotFoundError: No license has this key
        """
        key = normalize_license_key(query.license_key)
        if not key:
            raise InvalidFieldError("license_key", "License key is required")
        if not is_well_formed_key(key):
            raise LicenseNotFoundError()

        license = await self.license_repository.find_by_key(key)
        if license is None:
            raise LicenseNotFoundError()

        status = evaluate_status(license, self.clock())
        hwid_match = license.hwid_matches(query.hwid)
        valid = (
            license.is_claimed
            and status.state in (LicenseState.ACTIVE, LicenseState.LIFETIME)
            and hwid_match is not False
        )
        return LicenseCheckDTO(
            license_key=license.license_key,
            valid=valid,
            status=status.state.value,
            is_expired=status.is_expired,
            is_lifetime=status.is_lifetime,
            expires_at=status.expires_at,
            remaining_seconds=status.remaining_seconds,
            is_claimed=license.is_claimed,
            hwid_bound=license.hwid is not None,
            hwid_match=hwid_match,
        )


class DashboardStatsHandler:
    """Handler for DashboardStatsQuery."""

    def __init__(
        self,
        account_repository: AccountRepository,
        license_repository: LicenseRepository,
        purchase_repository: PurchaseRepository,
    ):
        self.account_repository = account_repository
        self.license_repository = license_repository
        self.purchase_repository = purchase_repository

    async def handle(self, query: DashboardStatsQuery) -> DashboardStatsDTO:
        """Count users, licenses and completed purchases."""
        users = await self.account_repository.count_users()
        licenses = await self.license_repository.count_summary()
        sales = await self.purchase_repository.completed_summary()
        return DashboardStatsDTO(
            users=users,
            licenses=licenses.total,
            active_licenses=licenses.active,
            purchases=sales.purchases,
            revenue=sales.revenue,
        )
