"""
CheckLicenseQuery.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class CheckLicenseQuery:
    """
    Query issued by the client add-on to check a key.

    ``hwid`` is compared against the bound fingerprint, if any.
    """

    license_key: str
    hwid: Optional[str] = None
