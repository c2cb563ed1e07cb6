"""
RecordPaymentCommand.

Command to record a payment against a license.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional, Union


@dataclass
class RecordPaymentCommand:
    """Command to record a payment and apply its renewal effects."""

    license_id: int
    amount: Union[Decimal, int, str]
    payment_type: str
    additional_users: Optional[int] = None
    payment_date: Optional[datetime] = None
