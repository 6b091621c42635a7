"""
Activation commands.
"""

import uuid
from dataclasses import dataclass
from typing import Optional


@dataclass
class ActivateLicenseCommand:
    """Claim a license by key for the calling user."""

    user_id: uuid.UUID
    license_key: str


@dataclass
class BindHwidCommand:
    """Bind (or clear, with an empty value) the HWID of an owned license."""

    user_id: uuid.UUID
    license_id: uuid.UUID
    hwid: Optional[str]
