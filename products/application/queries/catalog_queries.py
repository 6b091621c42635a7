"""
Catalog and purchase queries.
"""
import uuid
from dataclasses import dataclass


@dataclass
class ListCatalogQuery:
    """Query for every product with its pricing tiers."""

    beta_last: bool = False


@dataclass
class GetProductQuery:
    """Query for one product by slug."""

    slug: str


@dataclass
class ListPurchasesQuery:
    """Query for a user's purchases."""

    user_id: uuid.UUID
