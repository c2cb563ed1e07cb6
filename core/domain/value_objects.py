"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
import re
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


_NON_DIGITS = re.compile(r"\D")


@dataclass(frozen=True)
class PhoneNumber(ValueObject):
    """
    Phone number value object.

    Stored in the form used for delivery: an optional leading ``+``
    followed by digits only.
    """

    value: str

    def __post_init__(self):
        """Validate phone number."""
        if not self.value or not _NON_DIGITS.sub("", self.value):
            raise ValueError(f"Invalid phone number: {self.value}")

    @classmethod
    def parse(cls, raw: str) -> "PhoneNumber":
        """
        Normalize a raw phone number.

        Args:
            raw: Phone number as typed by a person

        Returns:
            PhoneNumber with formatting characters removed
        """
        raw = (raw or "").strip()
        prefix = "+" if raw.startswith("+") else ""
        return cls(prefix + _NON_DIGITS.sub("", raw))

    @property
    def digits(self) -> str:
        """Digits only, used for duplicate detection."""
        return _NON_DIGITS.sub("", self.value)

    def __str__(self) -> str:
        """Return phone number as string."""
        return self.value


def normalize_contact(raw: Optional[str]) -> str:
    """Reduce a contact phone to its digits for comparisons."""
    return _NON_DIGITS.sub("", raw or "")


def normalize_location(raw: Optional[str]) -> str:
    """Case- and whitespace-insensitive form of a location name or address."""
    return (raw or "").strip().lower()


class LicenseStatus(Enum):
    """License status value object."""

    ACTIVE = "active"
    EXPIRED = "expired"
    REVOKED = "revoked"
    SUSPENDED = "suspended"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value


class SubscriptionStatus(Enum):
    """Subscription status value object."""

    ACTIVE = "active"
    EXPIRED = "expired"
    CANCELLED = "cancelled"
    GRACE_PERIOD = "grace_period"

    def __str__(self) -> str:
        """Return status as string."""
        return self.value


class PaymentType(Enum):
    """Payment type value object."""

    INITIAL = "initial"
    ANNUAL = "annual"
    USER = "user"

    def __str__(self) -> str:
        """Return payment type as string."""
        return self.value


@dataclass(frozen=True)
class HardwareId(ValueObject):
    """Opaque device fingerprint value object."""

    value: str

    def __post_init__(self):
        """Validate hardware identifier."""
        if not self.value or len(self.value.strip()) == 0:
            raise ValueError("Hardware ID cannot be empty")
        if len(self.value) > 255:
            raise ValueError("Hardware ID too long")

    def __str__(self) -> str:
        """Return identifier as string."""
        return self.value
