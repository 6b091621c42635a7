"""
Django implementation of LicenseRepository port.

This adapter converts between domain entities and Django ORM models.
"""
import uuid
from datetime import datetime
from typing import Any, List, Mapping, Optional

from asgiref.sync import sync_to_async
from django.db import IntegrityError, transaction
from django.db.models import Count, Q

from core.domain.exceptions import LicenseKeyCollisionError
from core.domain.value_objects import DurationType
from core.infrastructure.database import translate_store_errors
from licenses.domain.license import License, LicenseDetails, LicenseSummary
from licenses.infrastructure.models import License as LicenseModel
from licenses.ports.license_repository import UPDATABLE_FIELDS, LicenseRepository


class DjangoLicenseRepository(LicenseRepository):
    """
    Django ORM implementation of LicenseRepository.

    This adapter:
    1. Converts Django models to domain entities
    2. Converts domain entities to Django models
    3. Expresses ownership changes as conditional UPDATEs
    """

    def _to_domain(self, model: LicenseModel) -> License:
        """
        Convert Django model to domain entity.

        Args:
            model: Django License model

        Returns:
            License domain entity
        """
        return License(
            id=model.id,
            license_key=model.license_key,
            product_id=model.product_id,
            owner_id=model.owner_id,
            issued_by=model.issued_by_id,
            is_active=model.is_active,
            duration_type=DurationType(model.duration_type) if model.duration_type else None,
            hwid=model.hwid or None,
            created_at=model.created_at,
            activated_at=model.activated_at,
            expires_at=model.expires_at,
        )

    def _to_model(self, license: License) -> LicenseModel:
        """
        Convert domain entity to Django model.

        Args:
            license: License domain entity

        Returns:
            Django License model (unsaved)
        """
        return LicenseModel(
            id=license.id,
            license_key=license.license_key,
            product_id=license.product_id,
            owner_id=license.owner_id,
            issued_by_id=license.issued_by,
            is_active=license.is_active,
            duration_type=license.duration_type.value if license.duration_type else None,
            hwid=license.hwid,
            created_at=license.created_at,
            activated_at=license.activated_at,
            expires_at=license.expires_at,
        )

    def _to_details(self, model: LicenseModel) -> LicenseDetails:
        owner = model.owner
        product = model.product
        profile = getattr(owner, "profile", None) if owner else None
        return LicenseDetails(
            license=self._to_domain(model),
            owner_email=owner.email if owner else None,
            owner_display_name=profile.display_name if profile else None,
            product_name=product.name if product else None,
            product_slug=product.slug if product else None,
            product_is_beta=product.is_beta if product else None,
        )

    @sync_to_async
    @translate_store_errors
    def add(self, license: License) -> License:
        """Insert a license, reporting a taken key as a collision."""
        model = self._to_model(license)
        try:
            with transaction.atomic():
                model.save(force_insert=True)
        except IntegrityError as e:
            if LicenseModel.objects.filter(license_key=license.license_key).exists():
                raise LicenseKeyCollisionError(license.license_key) from e
            raise
        return self._to_domain(model)

    @sync_to_async
    @translate_store_errors
    def find_by_id(self, license_id: uuid.UUID) -> Optional[License]:
        """Find license by ID."""
        model = LicenseModel.objects.filter(id=license_id).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    @translate_store_errors
    def find_by_key(self, license_key: str) -> Optional[License]:
        """Find license by key."""
        model = LicenseModel.objects.filter(license_key=license_key).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    @translate_store_errors
    def claim(self, license_id: uuid.UUID, owner_id: uuid.UUID, activated_at: datetime) -> bool:
        """UPDATE ... WHERE owner_id IS NULL AND is_active."""
        updated = LicenseModel.objects.filter(
            id=license_id, owner__isnull=True, is_active=True
        ).update(owner_id=owner_id, activated_at=activated_at)
        return updated == 1

    @sync_to_async
    @translate_store_errors
    def set_hwid(self, license_id: uuid.UUID, owner_id: uuid.UUID, hwid: Optional[str]) -> bool:
        """UPDATE ... WHERE id AND owner_id."""
        updated = LicenseModel.objects.filter(id=license_id, owner_id=owner_id).update(hwid=hwid)
        return updated == 1

    @sync_to_async
    @translate_store_errors
    def update_fields(self, license_id: uuid.UUID, changes: Mapping[str, Any]) -> bool:
        """Sparse update of whitelisted fields."""
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields not updatable: {sorted(unknown)}")

        values = dict(changes)
        if "duration_type" in values and isinstance(values["duration_type"], DurationType):
            values["duration_type"] = values["duration_type"].value
        updated = LicenseModel.objects.filter(id=license_id).update(**values)
        return updated == 1

    @sync_to_async
    @translate_store_errors
    def release(self, license_id: uuid.UUID) -> bool:
        """Clear ownership."""
        updated = LicenseModel.objects.filter(id=license_id).update(
            owner_id=None, activated_at=None, hwid=None
        )
        return updated == 1

    @sync_to_async
    @translate_store_errors
    def delete(self, license_id: uuid.UUID) -> bool:
        """Delete a license."""
        deleted, _ = LicenseModel.objects.filter(id=license_id).delete()
        return deleted > 0

    @sync_to_async
    @translate_store_errors
    def list_for_owner(self, owner_id: uuid.UUID) -> List[LicenseDetails]:
        """List licenses owned by a user."""
        queryset = (
            LicenseModel.objects.filter(owner_id=owner_id)
            .select_related("owner__profile", "product")
            .order_by("-created_at")
        )
        return [self._to_details(model) for model in queryset]

    @sync_to_async
    @translate_store_errors
    def list_all(self) -> List[LicenseDetails]:
        """List all licenses."""
        queryset = LicenseModel.objects.select_related("owner__profile", "product").order_by(
            "-created_at"
        )
        return [self._to_details(model) for model in queryset]

    @sync_to_async
    @translate_store_errors
    def count_summary(self) -> LicenseSummary:
        """Count licenses."""
        totals = LicenseModel.objects.aggregate(
            total=Count("id"), active=Count("id", filter=Q(is_active=True))
        )
        return LicenseSummary(total=totals["total"], active=totals["active"])
