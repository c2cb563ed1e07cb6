"""
Subscription domain entity.

A subscription is one time-bounded validity window of a license.
Renewals extend the license's most recent row in place; a new row is
only created when the license has none.
"""
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import Optional

from django.utils import timezone

from core.domain.exceptions import InvalidSubscriptionStatusError
from core.domain.value_objects import SubscriptionStatus


@dataclass(frozen=True)
class Subscription:
    """
    Subscription domain entity.

    The grace period always ends together with the subscription; no
    extra grace window is granted.
    """

    id: Optional[int]
    license_id: int
    start_date: datetime
    end_date: datetime
    annual_fee: Decimal
    status: SubscriptionStatus
    grace_period_end: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        """Validate subscription entity."""
        if not self.license_id:
            raise ValueError("License ID is required")
        if self.end_date < self.start_date:
            raise ValueError("Subscription cannot end before it starts")

    @classmethod
    def create(
        cls,
        license_id: int,
        start_date: datetime,
        end_date: datetime,
        annual_fee: Decimal,
    ) -> "Subscription":
        """
        Create a new active Subscription entity.

        Args:
            license_id: Owning license id
            start_date: Window start
            end_date: Window end (inclusive)
            annual_fee: Fee charged for the window

        Returns:
            Subscription entity instance
        """
        now = timezone.now()
        return cls(
            id=None,
            license_id=license_id,
            start_date=start_date,
            end_date=end_date,
            annual_fee=annual_fee,
            status=SubscriptionStatus.ACTIVE,
            grace_period_end=end_date,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_active(self) -> bool:
        return self.status == SubscriptionStatus.ACTIVE

    def is_current(self, as_of: datetime) -> bool:
        """Active and not yet past its end date."""
        return self.is_active and as_of <= self.end_date

    def in_grace_period(self, as_of: datetime) -> bool:
        """Whether an explicit grace window is still open at ``as_of``."""
        return self.grace_period_end is not None and as_of <= self.grace_period_end

    def renew(
        self, start_date: datetime, end_date: datetime, annual_fee: Optional[Decimal] = None
    ) -> "Subscription":
        """
        Extend this row to a new window and make it active again.

        Returns:
            New Subscription instance covering the new window

        Raises:
            InvalidSubscriptionStatusError: If the row was cancelled
        """
        if self.status == SubscriptionStatus.CANCELLED:
            raise InvalidSubscriptionStatusError("Cancelled subscriptions cannot be renewed")
        return replace(
            self,
            start_date=start_date,
            end_date=end_date,
            status=SubscriptionStatus.ACTIVE,
            grace_period_end=end_date,
            annual_fee=self.annual_fee if annual_fee is None else annual_fee,
            updated_at=timezone.now(),
        )

    def cancel(self, cancelled_at: datetime) -> "Subscription":
        """Cancel and pull the end date back to the cancellation instant."""
        return replace(
            self,
            status=SubscriptionStatus.CANCELLED,
            start_date=min(self.start_date, cancelled_at),
            end_date=cancelled_at,
            grace_period_end=cancelled_at,
            updated_at=timezone.now(),
        )

    def expire(self) -> "Subscription":
        """
        Create a new Subscription instance with expired status.

        Returns:
            New Subscription instance with expired status
        """
        return replace(self, status=SubscriptionStatus.EXPIRED, updated_at=timezone.now())
