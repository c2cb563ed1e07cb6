"""
RenewSubscriptionCommand.

Command to extend a subscription by one year.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass
class RenewSubscriptionCommand:
    """Command to renew a subscription from its end date or from now."""

    subscription_id: int
    extend_from_now: bool = False
    annual_fee: Optional[Decimal] = None
