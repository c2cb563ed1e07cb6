"""
SubscriptionRepository port (interface).

This defines the contract for subscription persistence.
Infrastructure layer implements this interface.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Tuple

from licenses.domain.license import License
from subscriptions.domain.subscription import Subscription


class SubscriptionRepository(ABC):
    """Repository interface for Subscription entities."""

    @abstractmethod
    async def find_by_id(self, subscription_id: int) -> Optional[Subscription]:
        """
        Find a subscription by ID.

        Args:
            subscription_id: Subscription id

        Returns:
            Subscription entity or None if not found
        """
        pass

    @abstractmethod
    async def find_active_for_license(self, license_id: int) -> Optional[Subscription]:
        """The license's active subscription, if any."""
        pass

    @abstractmethod
    async def find_latest_for_license(self, license_id: int) -> Optional[Subscription]:
        """The license's subscription with the latest end date, whatever its status."""
        pass

    @abstractmethod
    async def list_for_license(self, license_id: int) -> List[Subscription]:
        """All subscriptions of a license, newest first."""
        pass

    @abstractmethod
    async def save(self, subscription: Subscription) -> Subscription:
        """
        Insert or update a subscription.

        Saving an active subscription also refreshes the license's
        informational start/end copy.

        Returns:
            Saved Subscription entity
        """
        pass

    @abstractmethod
    async def replace_active(
        self, subscription: Subscription, cancelled_at: datetime
    ) -> Subscription:
        """
        Cancel the license's active subscriptions and insert ``subscription``.

        Both steps run in one transaction.
        """
        pass

    @abstractmethod
    async def find_lapsed(self, now: datetime) -> List[Tuple[License, Subscription]]:
        """Active or grace-period subscriptions whose end date has passed."""
        pass

    @abstractmethod
    async def expire(self, subscription_ids: List[int]) -> int:
        """
        Flip the given subscriptions to expired if still active or in grace.

        Returns:
            Number of rows changed
        """
        pass

    @abstractmethod
    async def find_expiring(
        self, window_start: datetime, window_end: datetime
    ) -> List[Tuple[License, Subscription]]:
        """
        Active subscriptions of active licenses with a contact phone
        whose end date falls inside the window.
        """
        pass
