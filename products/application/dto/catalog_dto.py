"""
Catalog and purchase DTOs for API responses.
"""
import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from products.domain.product import CatalogEntry, PricingTier, PurchaseDetails


@dataclass
class PricingTierDTO:
    """DTO for a pricing tier."""

    id: uuid.UUID
    product_id: uuid.UUID
    duration_type: str
    price: Decimal
    duration_days: Optional[int]

    @classmethod
    def from_domain(cls, tier: PricingTier) -> "PricingTierDTO":
        return cls(
            id=tier.id,
            product_id=tier.product_id,
            duration_type=tier.duration_type.value,
            price=tier.price,
            duration_days=tier.duration_days,
        )


@dataclass
class ProductDTO:
    """DTO for a product with its pricing tiers."""

    id: uuid.UUID
    slug: str
    name: str
    is_beta: bool
    features: List[str]
    created_at: Optional[datetime]
    pricing_tiers: List[PricingTierDTO]

    @classmethod
    def from_entry(cls, entry: CatalogEntry) -> "ProductDTO":
        product = entry.product
        return cls(
            id=product.id,
            slug=product.slug,
            name=product.name,
            is_beta=product.is_beta,
            features=list(product.features),
            created_at=product.created_at,
            pricing_tiers=[PricingTierDTO.from_domain(t) for t in entry.pricing_tiers],
        )


@dataclass
class PurchaseDTO:
    """DTO for a purchase record."""

    id: uuid.UUID
    license_id: Optional[uuid.UUID]
    license_key: Optional[str]
    product_name: Optional[str]
    amount: Decimal
    status: str
    created_at: datetime

    @classmethod
    def from_details(cls, details: PurchaseDetails) -> "PurchaseDTO":
        purchase = details.purchase
        return cls(
            id=purchase.id,
            license_id=purchase.license_id,
            license_key=details.license_key,
            product_name=details.product_name,
            amount=purchase.amount,
            status=purchase.status.value,
            created_at=purchase.created_at,
        )


@dataclass
class PurchasePreviewDTO:
    """DTO for the payment redirect of a purchase preview."""

    message: str
    product_id: uuid.UUID
    pricing_tier_id: uuid.UUID
    amount: Decimal
    payment_method: str
    redirect_url: str
