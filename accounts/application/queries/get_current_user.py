"""
GetCurrentUserQuery.
"""
import uuid
from dataclasses import dataclass


@dataclass
class GetCurrentUserQuery:
    """Query for the authenticated user's account."""

    user_id: uuid.UUID
