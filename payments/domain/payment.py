"""
Payment domain entity.

Payments form an append-only ledger per license. They are trusted
inputs recorded by an administrator or by the seat-increment flow.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from django.utils import timezone

from core.domain.exceptions import InvalidPaymentError
from core.domain.value_objects import PaymentType


@dataclass(frozen=True)
class Payment:
    """Payment domain entity."""

    id: Optional[int]
    license_id: int
    amount: Decimal
    payment_date: datetime
    is_annual_subscription: bool
    payment_type: PaymentType
    additional_users: Optional[int]

    def __post_init__(self):
        """Validate payment entity."""
        if self.amount <= 0:
            raise InvalidPaymentError()
        if self.additional_users is not None and self.additional_users < 1:
            raise InvalidPaymentError("Additional users must be at least 1")

    @classmethod
    def create(
        cls,
        license_id: int,
        amount: Decimal,
        payment_type: PaymentType,
        additional_users: Optional[int] = None,
        payment_date: Optional[datetime] = None,
    ) -> "Payment":
        """
        Create a new Payment entity.

        Args:
            license_id: License id
            amount: Amount paid
            payment_type: initial, annual or user
            additional_users: Seats bought with this payment
            payment_date: When the payment was made (defaults to now)

        Returns:
            Payment entity instance
        """
        return cls(
            id=None,
            license_id=license_id,
            amount=Decimal(amount),
            payment_date=payment_date or timezone.now(),
            is_annual_subscription=payment_type == PaymentType.ANNUAL,
            payment_type=payment_type,
            additional_users=additional_users,
        )

    @property
    def is_initial(self) -> bool:
        return self.payment_type == PaymentType.INITIAL
