"""
License listing queries.
"""

import uuid
from dataclasses import dataclass


@dataclass
class ListOwnLicensesQuery:
    """Query for the licenses a user owns."""

    user_id: uuid.UUID


@dataclass
class ListAllLicensesQuery:
    """Query for every license (admin)."""
