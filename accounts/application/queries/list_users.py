"""
ListUsersQuery.
"""
from dataclasses import dataclass


@dataclass
class ListUsersQuery:
    """Query for every account with profile and roles (admin)."""
