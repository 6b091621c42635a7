"""
Catalog and purchase handlers.
"""
import logging
from typing import List
from urllib.parse import urlencode

from core.domain.exceptions import PricingTierNotFoundError, ProductNotFoundError
from core.domain.value_objects import ProductSlug
from products.application.commands.preview_purchase import PreviewPurchaseCommand
from products.application.dto.catalog_dto import ProductDTO, PurchaseDTO, PurchasePreviewDTO
from products.application.queries.catalog_queries import (
    GetProductQuery,
    ListCatalogQuery,
    ListPurchasesQuery,
)
from products.ports.product_repository import ProductRepository
from products.ports.purchase_repository import PurchaseRepository

logger = logging.getLogger(__name__)


class ListCatalogHandler:
    """Handler for ListCatalogQuery."""

    def __init__(self, product_repository: ProductRepository):
        self.product_repository = product_repository

    async def handle(self, query: ListCatalogQuery) -> List[ProductDTO]:
        """Return products with tiers ordered by price."""
        entries = await self.product_repository.list_catalog(beta_last=query.beta_last)
        return [ProductDTO.from_entry(entry) for entry in entries]


class GetProductHandler:
    """Handler for GetProductQuery."""

    def __init__(self, product_repository: ProductRepository):
        self.product_repository = product_repository

    async def handle(self, query: GetProductQuery) -> ProductDTO:
        """
        Return one product.

        Raises:
            ProductNotFoundError: If no product has this slug, or the slug is malformed
        """
        try:
            slug = ProductSlug(query.slug)
        except ValueError as e:
            raise ProductNotFoundError(f"Product '{query.slug}' not found") from e

        entry = await self.product_repository.find_by_slug(slug.value)
        if entry is None:
            raise ProductNotFoundError(f"Product '{query.slug}' not found")
        return ProductDTO.from_entry(entry)


class ListPurchasesHandler:
    """Handler for ListPurchasesQuery."""

    def __init__(self, purchase_repository: PurchaseRepository):
        self.purchase_repository = purchase_repository

    async def handle(self, query: ListPurchasesQuery) -> List[PurchaseDTO]:
        """Return the user's purchases, newest first."""
        purchases = await self.purchase_repository.list_for_user(query.user_id)
        return [PurchaseDTO.from_details(p) for p in purchases]


class PreviewPurchaseHandler:
    """Handler for PreviewPurchaseCommand."""

    def __init__(self, product_repository: ProductRepository, payment_path: str = "/payment"):
        self.product_repository = product_repository
        self.payment_path = payment_path

    async def handle(self, command: PreviewPurchaseCommand) -> PurchasePreviewDTO:
        """
        Price a tier and build the redirect to the payment page.

        Raises:
            PricingTierNotFoundError: Unknown tier, or a tier of another product
        """
        tier = await self.product_repository.find_tier(command.pricing_tier_id)
        if tier is None or (command.product_id and tier.product_id != command.product_id):
            raise PricingTierNotFoundError()

        query = urlencode({"amount": str(tier.price), "method": command.payment_method})
        logger.info(
            "Purchase preview",
            extra={
                "user_id": str(command.user_id),
                "pricing_tier_id": str(tier.id),
                "payment_method": command.payment_method,
            },
        )
        return PurchasePreviewDTO(
            message="Redirecting to payment",
            product_id=tier.product_id,
            pricing_tier_id=tier.id,
            amount=tier.price,
            payment_method=command.payment_method,
            redirect_url=f"{self.payment_path}?{query}",
        )
