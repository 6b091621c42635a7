"""
Product repository port (interface).
"""
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from products.domain.product import CatalogEntry, PricingTier, Product


class ProductRepository(ABC):
    """
    Abstract repository for the catalog.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def find_by_id(self, product_id: uuid.UUID) -> Optional[Product]:
        """
        Find a product by ID.

        Args:
            product_id: Product UUID

        Returns:
            Product entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_slug(self, slug: str) -> Optional[CatalogEntry]:
        """
        Find a product and its pricing tiers by slug.

        Args:
            slug: Product slug

        Returns:
            CatalogEntry or None if not found
        """
        pass

    @abstractmethod
    async def list_catalog(self, beta_last: bool = False) -> List[CatalogEntry]:
        """
        List products with pricing tiers ordered by price.

        Args:
            beta_last: Order stable products before beta ones (admin view);
                otherwise products are ordered by creation

        Returns:
            List of CatalogEntry
        """
        pass

    @abstractmethod
    async def find_tier(self, tier_id: uuid.UUID) -> Optional[PricingTier]:
        """Find a pricing tier by ID."""
        pass
