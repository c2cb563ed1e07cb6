"""
Payment DTOs for caller-facing responses.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from payments.domain.payment import Payment


@dataclass
class PaymentDTO:
    """DTO for payment information."""

    id: int
    license_id: int
    amount: Decimal
    payment_date: datetime
    payment_type: str
    is_annual_subscription: bool
    additional_users: Optional[int]

    @classmethod
    def from_entity(cls, payment: Payment) -> "PaymentDTO":
        return cls(
            id=payment.id,
            license_id=payment.license_id,
            amount=payment.amount,
            payment_date=payment.payment_date,
            payment_type=payment.payment_type.value,
            is_annual_subscription=payment.is_annual_subscription,
            additional_users=payment.additional_users,
        )
