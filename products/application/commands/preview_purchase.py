"""
PreviewPurchaseCommand.
"""
import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass
class PreviewPurchaseCommand:
    """
    Command to price a pricing tier and build the payment redirect.

    Nothing is charged or persisted.
    """

    user_id: uuid.UUID
    pricing_tier_id: uuid.UUID
    payment_method: str
    product_id: Optional[uuid.UUID] = None
