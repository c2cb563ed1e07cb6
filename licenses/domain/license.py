"""
License domain entity.

This is the core domain entity representing a license.
It contains business logic and is independent of infrastructure.
"""
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import Optional

from django.utils import timezone

from core.domain.exceptions import InvalidLicenseStatusError
from core.domain.value_objects import LicenseStatus, normalize_location


@dataclass(frozen=True)
class License:
    """
    License domain entity.

    Represents the right to run the product at one customer location.
    This is an immutable value object with business logic.
    """

    id: Optional[int]
    license_key: str
    customer_name: Optional[str]
    customer_phone: Optional[str]
    status: LicenseStatus
    is_free_trial: bool
    free_trial_end_date: Optional[datetime]
    start_date: Optional[datetime]
    end_date: Optional[datetime]
    seat_count: int
    seat_limit: int
    location_name: Optional[str]
    location_address: Optional[str]
    initial_price: Decimal
    price_per_seat: Decimal
    product_tag: str
    purchase_date: datetime
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate license entity."""
        if not self.license_key:
            raise ValueError("License key is required")
        if self.seat_count < 0:
            raise ValueError("Seat count cannot be negative")
        if self.seat_limit < 0:
            raise ValueError("Seat limit cannot be negative")

    @classmethod
    def create(
        cls,
        license_key: str,
        customer_name: Optional[str],
        customer_phone: Optional[str],
        location_name: Optional[str],
        location_address: Optional[str],
        initial_price: Decimal,
        price_per_seat: Decimal,
        start_date: datetime,
        end_date: datetime,
        is_free_trial: bool = False,
        seat_limit: int = 2,
        product_tag: str = "grocery",
    ) -> "License":
        """
        Create a new License entity.

        Args:
            license_key: Generated license key
            customer_name: Customer display name
            customer_phone: Normalized contact phone
            location_name: Store or branch name
            location_address: Store address
            initial_price: Price of the perpetual license
            price_per_seat: Price charged per extra user
            start_date: Start of the first subscription window
            end_date: End of the first subscription window
            is_free_trial: Whether this license starts as a trial
            seat_limit: Maximum number of users
            product_tag: Product/version the license is valid for

        Returns:
            License entity instance
        """
        now = timezone.now()
        return cls(
            id=None,
            license_key=license_key,
            customer_name=customer_name,
            customer_phone=customer_phone,
            status=LicenseStatus.ACTIVE,
            is_free_trial=is_free_trial,
            free_trial_end_date=end_date if is_free_trial else None,
            start_date=start_date,
            end_date=end_date,
            seat_count=0,
            seat_limit=seat_limit,
            location_name=location_name,
            location_address=location_address,
            initial_price=initial_price,
            price_per_seat=price_per_seat,
            product_tag=product_tag,
            purchase_date=now,
            created_at=now,
            updated_at=now,
        )

    @property
    def has_location(self) -> bool:
        """Whether location details were recorded; required before activation."""
        return bool(self.location_name and self.location_address)

    @property
    def is_blocked(self) -> bool:
        """Revoked and suspended licenses refuse every device operation."""
        return self.status in (LicenseStatus.REVOKED, LicenseStatus.SUSPENDED)

    @property
    def can_add_seat(self) -> bool:
        return self.seat_count < self.seat_limit

    def matches_address(self, address: str) -> bool:
        """Case- and whitespace-insensitive address comparison."""
        return normalize_location(self.location_address) == normalize_location(address)

    def suspend(self) -> "License":
        """
        Create a new License instance with suspended status.

        Returns:
            New License instance with suspended status
        """
        if self.status == LicenseStatus.REVOKED:
            raise InvalidLicenseStatusError("Cannot suspend a revoked license")
        return replace(self, status=LicenseStatus.SUSPENDED, updated_at=timezone.now())

    def resume(self) -> "License":
        """
        Create a new License instance with active status.

        Returns:
            New License instance with active status
        """
        if self.status != LicenseStatus.SUSPENDED:
            raise InvalidLicenseStatusError("Can only resume a suspended license")
        return replace(self, status=LicenseStatus.ACTIVE, updated_at=timezone.now())

    def convert_from_trial(self) -> "License":
        """A paid trial becomes a regular license for good."""
        if not self.is_free_trial:
            return self
        return replace(
            self, is_free_trial=False, free_trial_end_date=None, updated_at=timezone.now()
        )

    def with_changes(self, **changes) -> "License":
        """Copy with admin edits applied; the key never changes."""
        changes.pop("license_key", None)
        changes.pop("id", None)
        return replace(self, updated_at=timezone.now(), **changes)
