"""
CreateSubscriptionCommand.

Command to open a new subscription window for a license.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class CreateSubscriptionCommand:
    """Command to create a subscription, replacing any active one."""

    license_id: int
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    annual_fee: Optional[Decimal] = None
