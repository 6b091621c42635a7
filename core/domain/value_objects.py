"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


@dataclass(frozen=True)
class Email(ValueObject):
    """Email value object, case-normalized on construction."""

    value: str

    def __post_init__(self):
        """Normalize and validate email format."""
        normalized = (self.value or "").strip().lower()
        local, _, domain = normalized.partition("@")
        if not local or not domain or " " in normalized:
            raise ValueError(f"Invalid email address: {self.value}")
        object.__setattr__(self, "value", normalized)

    @property
    def local_part(self) -> str:
        """Return the part before the @ sign."""
        return self.value.split("@", 1)[0]

    def __str__(self) -> str:
        """Return email as string."""
        return self.value


@dataclass(frozen=True)
class ProductSlug(ValueObject):
    """Product slug value object."""

    value: str

    def __post_init__(self):
        """Validate slug format."""
        if not self.value:
            raise ValueError("Product slug cannot be empty")
        if not self.value.replace("-", "").replace("_", "").isalnum():
            raise ValueError(f"Invalid product slug format: {self.value}")

    def __str__(self) -> str:
        """Return slug as string."""
        return self.value


class Role(Enum):
    """Role assigned to a user account."""

    USER = "user"
    ADMIN = "admin"

    def __str__(self) -> str:
        """Return role as string."""
        return self.value


class DurationType(Enum):
    """Validity category of a license or pricing tier."""

    WEEK = "week"
    MONTH = "month"
    LIFETIME = "lifetime"

    @property
    def default_days(self) -> Optional[int]:
        """Standard length in days, None for lifetime."""
        return {"week": 7, "month": 30}.get(self.value)

    def __str__(self) -> str:
        """Return duration type as string."""
        return self.value


class LicenseState(Enum):
    """Displayed state of a license at a point in time."""

    LIFETIME = "lifetime"
    ACTIVE = "active"
    EXPIRED = "expired"
    DEACTIVATED = "deactivated"

    def __str__(self) -> str:
        """Return state as string."""
        return self.value


class MailKind(Enum):
    """Transactional email templates."""

    CONFIRMATION = "confirmation"
    PASSWORD_RESET = "password_reset"

    def __str__(self) -> str:
        """Return kind as string."""
        return self.value
