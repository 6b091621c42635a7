"""
Django ORM implementation of PurchaseRepository.
"""
import uuid
from decimal import Decimal
from typing import List

from asgiref.sync import sync_to_async
from django.db.models import Count, Sum

from core.infrastructure.database import translate_store_errors
from products.domain.product import Purchase, PurchaseDetails, PurchaseStatus, SalesSummary
from products.infrastructure.models import Purchase as PurchaseModel
from products.ports.purchase_repository import PurchaseRepository


class DjangoPurchaseRepository(PurchaseRepository):
    """Django ORM implementation of PurchaseRepository."""

    @sync_to_async
    @translate_store_errors
    def list_for_user(self, user_id: uuid.UUID) -> List[PurchaseDetails]:
        """List a user's purchases with license key and product name."""
        queryset = (
            PurchaseModel.objects.filter(user_id=user_id)
            .select_related("license__product")
            .order_by("-created_at")
        )
        details = []
        for model in queryset:
            license_model = model.license
            product = license_model.product if license_model else None
            details.append(
                PurchaseDetails(
                    purchase=Purchase(
                        id=model.id,
                        user_id=model.user_id,
                        license_id=model.license_id,
                        amount=model.amount,
                        status=PurchaseStatus(model.status),
                        created_at=model.created_at,
                    ),
                    license_key=license_model.license_key if license_model else None,
                    product_name=product.name if product else None,
                )
            )
        return details

    @sync_to_async
    @translate_store_errors
    def completed_summary(self) -> SalesSummary:
        """Aggregate completed purchases."""
        totals = PurchaseModel.objects.filter(status=PurchaseStatus.COMPLETED.value).aggregate(
            count=Count("id"), total=Sum("amount")
        )
        return SalesSummary(purchases=totals["count"], revenue=totals["total"] or Decimal("0"))
