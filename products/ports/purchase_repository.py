"""
Purchase repository port (interface).
"""
import uuid
from abc import ABC, abstractmethod
from typing import List

from products.domain.product import PurchaseDetails, SalesSummary


class PurchaseRepository(ABC):
    """Abstract repository for purchase records."""

    @abstractmethod
    async def list_for_user(self, user_id: uuid.UUID) -> List[PurchaseDetails]:
        """List a user's purchases, newest first."""
        pass

    @abstractmethod
    async def completed_summary(self) -> SalesSummary:
        """Count completed purchases and sum their amounts."""
        pass
