"""
IssueLicenseCommand.

Command for an administrator to issue a new license.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

from core.domain.value_objects import DurationType


@dataclass
class IssueLicenseCommand:
    """
    Command to issue a license.

    Without ``owner_email`` (or with an email nobody registered) the
    license is issued unclaimed, ready to be activated by key.
    """

    issued_by: uuid.UUID
    product_id: Optional[uuid.UUID] = None
    duration_type: Optional[DurationType] = None
    duration_days: Optional[int] = None
    owner_email: Optional[str] = None
    hwid: Optional[str] = None
