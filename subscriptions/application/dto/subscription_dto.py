"""
Subscription DTOs for caller-facing responses.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from subscriptions.domain.subscription import Subscription


@dataclass
class SubscriptionDTO:
    """DTO for subscription information."""

    id: int
    license_id: int
    start_date: datetime
    end_date: datetime
    annual_fee: Decimal
    status: str
    grace_period_end: Optional[datetime]

    @classmethod
    def from_entity(cls, subscription: Subscription) -> "SubscriptionDTO":
        return cls(
            id=subscription.id,
            license_id=subscription.license_id,
            start_date=subscription.start_date,
            end_date=subscription.end_date,
            annual_fee=subscription.annual_fee,
            status=subscription.status.value,
            grace_period_end=subscription.grace_period_end,
        )
