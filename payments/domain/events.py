"""
Payment domain events.
"""

from decimal import Decimal
from typing import Optional

from core.domain.events import DomainEvent


class PaymentRecorded(DomainEvent):
    """Event raised when a payment is recorded against a license."""

    def __init__(
        self,
        payment_id: int,
        license_id: int,
        amount: Decimal,
        payment_type: str,
        converted_trial: bool,
        additional_users: Optional[int] = None,
    ):
        """
        Initialize PaymentRecorded event.

        Args:
            payment_id: Payment id
            license_id: License id
            amount: Amount paid
            payment_type: initial, annual or user
            converted_trial: Whether the payment ended a free trial
            additional_users: Seats bought with this payment
        """
        super().__init__(aggregate_id=license_id)
        self.payment_id = payment_id
        self.license_id = license_id
        self.amount = amount
        self.payment_type = payment_type
        self.converted_trial = converted_trial
        self.additional_users = additional_users
