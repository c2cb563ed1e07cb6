"""
PaymentRepository port (interface).

This defines the contract for payment persistence.
Infrastructure layer implements this interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from licenses.domain.license import License
from payments.domain.payment import Payment
from subscriptions.domain.subscription import Subscription


class PaymentRepository(ABC):
    """Repository interface for the payment ledger."""

    @abstractmethod
    async def list_for_license(self, license_id: int) -> List[Payment]:
        """
        Find all payments for a license.

        Args:
            license_id: License id

        Returns:
            List of Payment entities, newest first
        """
        pass

    @abstractmethod
    async def has_initial_payment(self, license_id: int) -> bool:
        """Whether the license already has an initial payment."""
        pass

    @abstractmethod
    async def record(
        self,
        payment: Payment,
        license: License,
        subscription: Optional[Subscription],
        seat_limit_increase: int = 0,
    ) -> Payment:
        """
        Record a payment and apply its effects in one transaction.

        Args:
            payment: Payment to append
            license: License with trial and price fields already updated
            subscription: Subscription to insert or extend, if any
            seat_limit_increase: Seats to add to the license's limit

        Returns:
            Saved Payment entity
        """
        pass
