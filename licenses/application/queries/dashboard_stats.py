"""
DashboardStatsQuery.
"""

from dataclasses import dataclass


@dataclass
class DashboardStatsQuery:
    """Query for the admin dashboard counters."""
