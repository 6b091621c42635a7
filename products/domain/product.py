"""
Catalog and purchase domain entities.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from core.domain.value_objects import DurationType


@dataclass(frozen=True)
class Product:
    """A product that can be licensed."""

    id: uuid.UUID
    slug: str
    name: str
    is_beta: bool
    features: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class PricingTier:
    """A purchasable duration of a product."""

    id: uuid.UUID
    product_id: uuid.UUID
    duration_type: DurationType
    price: Decimal
    duration_days: Optional[int] = None


@dataclass(frozen=True)
class CatalogEntry:
    """A product with its pricing tiers ordered by price."""

    product: Product
    pricing_tiers: List[PricingTier]


class PurchaseStatus(Enum):
    """Lifecycle of a purchase record."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Purchase:
    """A recorded purchase of a license."""

    id: uuid.UUID
    user_id: uuid.UUID
    license_id: Optional[uuid.UUID]
    amount: Decimal
    status: PurchaseStatus
    created_at: datetime


@dataclass(frozen=True)
class PurchaseDetails:
    """Read model joining a purchase with its license key and product name."""

    purchase: Purchase
    license_key: Optional[str]
    product_name: Optional[str]


@dataclass(frozen=True)
class SalesSummary:
    """Completed purchase count and revenue."""

    purchases: int
    revenue: Decimal
