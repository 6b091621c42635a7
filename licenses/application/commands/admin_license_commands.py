"""
Administrative license commands.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class UpdateLicenseCommand:
    """
    Sparse update of a license.

    Only keys present in ``changes`` are written; a key mapped to None
    clears that column.
    """

    license_id: uuid.UUID
    changes: Dict[str, Any] = field(default_factory=dict)


@dataclass
class DeactivateLicenseCommand:
    """Flip a license to inactive. Reversible through UpdateLicenseCommand."""

    license_id: uuid.UUID


@dataclass
class ReleaseLicenseCommand:
    """Clear the owner of a license so it can be activated again."""

    license_id: uuid.UUID


@dataclass
class DeleteLicenseCommand:
    """Remove a license permanently."""

    license_id: uuid.UUID
