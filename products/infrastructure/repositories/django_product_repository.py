"""
Django ORM implementation of ProductRepository.
"""
import uuid
from typing import List, Optional

from asgiref.sync import sync_to_async
from django.db.models import Prefetch

from core.domain.value_objects import DurationType
from core.infrastructure.database import translate_store_errors
from products.domain.product import CatalogEntry, PricingTier, Product
from products.infrastructure.models import PricingTier as PricingTierModel
from products.infrastructure.models import Product as ProductModel
from products.ports.product_repository import ProductRepository


class DjangoProductRepository(ProductRepository):
    """
    Django ORM implementation of ProductRepository.

    Converts between domain entities and Django models.
    """

    @staticmethod
    def _to_domain(model: ProductModel) -> Product:
        """Convert Django model to domain entity."""
        return Product(
            id=model.id,
            slug=model.slug,
            name=model.name,
            is_beta=model.is_beta,
            features=list(model.features or []),
            created_at=model.created_at,
        )

    @staticmethod
    def _tier_to_domain(model: PricingTierModel) -> PricingTier:
        return PricingTier(
            id=model.id,
            product_id=model.product_id,
            duration_type=DurationType(model.duration_type),
            price=model.price,
            duration_days=model.duration_days,
        )

    def _entry(self, model: ProductModel) -> CatalogEntry:
        return CatalogEntry(
            product=self._to_domain(model),
            pricing_tiers=[self._tier_to_domain(t) for t in model.pricing_tiers.all()],
        )

    @staticmethod
    def _catalog_queryset():
        return ProductModel.objects.prefetch_related(
            Prefetch("pricing_tiers", queryset=PricingTierModel.objects.order_by("price"))
        )

    @sync_to_async
    @translate_store_errors
    def find_by_id(self, product_id: uuid.UUID) -> Optional[Product]:
        """Find product by ID."""
        model = ProductModel.objects.filter(id=product_id).first()
        return self._to_domain(model) if model else None

    @sync_to_async
    @translate_store_errors
    def find_by_slug(self, slug: str) -> Optional[CatalogEntry]:
        """Find product with tiers by slug."""
        model = self._catalog_queryset().filter(slug=slug).first()
        return self._entry(model) if model else None

    @sync_to_async
    @translate_store_errors
    def list_catalog(self, beta_last: bool = False) -> List[CatalogEntry]:
        """List products with tiers."""
        ordering = ["is_beta", "created_at"] if beta_last else ["created_at"]
        return [self._entry(model) for model in self._catalog_queryset().order_by(*ordering)]

    @sync_to_async
    @translate_store_errors
    def find_tier(self, tier_id: uuid.UUID) -> Optional[PricingTier]:
        """Find pricing tier by ID."""
        model = PricingTierModel.objects.filter(id=tier_id).first()
        return self._tier_to_domain(model) if model else None
