"""
LicenseRepository port (interface).

This defines the contract for license persistence.
Infrastructure layer implements this interface.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from licenses.domain.license import License


class LicenseRepository(ABC):
    """
    Repository interface for License aggregate.

    Multi-row operations are atomic: they either fully commit or
    leave the store untouched.
    """

    @abstractmethod
    async def find_by_id(self, license_id: int) -> Optional[License]:
        """
        Find a license by ID.

        Args:
            license_id: License id

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_key(self, license_key: str) -> Optional[License]:
        """
        Find a license by its normalized key.

        Args:
            license_key: Normalized license key

        Returns:
            License entity or None if not found
        """
        pass

    @abstractmethod
    async def key_exists(self, license_key: str) -> bool:
        """Check whether a key is already taken."""
        pass

    @abstractmethod
    async def find_duplicate(self, contact: str, location_name: str) -> Optional[License]:
        """
        Find a license of any status for the same contact and location.

        Args:
            contact: Phone reduced to digits
            location_name: Trimmed, lower-cased location name

        Returns:
            Colliding License entity or None
        """
        pass

    @abstractmethod
    async def create(
        self,
        license: License,
        annual_fee: Decimal,
        initial_payment: Optional[Decimal],
    ) -> License:
        """
        Persist a new license with its first subscription.

        The subscription covers the license's start/end window. When
        ``initial_payment`` is given an initial payment row is written
        too. Everything happens in one transaction.

        Returns:
            Saved License entity with its id
        """
        pass

    @abstractmethod
    async def save(self, license: License) -> License:
        """
        Save the mutable fields of an existing license.

        Args:
            license: License entity to save

        Returns:
            Saved license entity
        """
        pass

    @abstractmethod
    async def revoke(
        self, license_id: int, revoked_at: datetime, edited: Optional[License] = None
    ) -> Tuple[int, int]:
        """
        Revoke a license in one transaction.

        Sets the status to revoked, deactivates every active activation
        and cancels every active subscription with its end date pulled
        back to ``revoked_at``. When ``edited`` is given its field edits
        are written first, in the same transaction.

        Returns:
            (deactivated activations, cancelled subscriptions)
        """
        pass

    @abstractmethod
    async def expire_lapsed(self, now: datetime) -> List[int]:
        """
        Flip active licenses whose subscriptions have all lapsed to expired.

        Returns:
            Ids of the licenses that changed
        """
        pass

    @abstractmethod
    async def find_trials_to_expire(self, now: datetime) -> List[License]:
        """Trials past their end date, without payments, not yet expired or revoked."""
        pass

    @abstractmethod
    async def expire_trials(self, license_ids: List[int], now: datetime) -> int:
        """
        Expire trial licenses and their open subscriptions in one transaction.

        Returns:
            Number of licenses expired
        """
        pass

    @abstractmethod
    async def increment_seat_count(self, license_id: int) -> Optional[License]:
        """
        Atomically add one seat if the license is below its limit.

        Returns:
            Updated License, or None if the limit was already reached
        """
        pass

    @abstractmethod
    async def decrement_seat_count(self, license_id: int) -> Optional[License]:
        """
        Atomically remove one seat if the count is above zero.

        Returns:
            Updated License, or None if the count was already zero
        """
        pass

    @abstractmethod
    async def set_seat_count(self, license_id: int, seat_count: int) -> Optional[License]:
        """Overwrite the seat count."""
        pass

    @abstractmethod
    async def count_by_status(self) -> Dict[str, int]:
        """Number of licenses per status."""
        pass

    @abstractmethod
    async def search(
        self, query: str, status: Optional[str] = None, limit: int = 50
    ) -> List[License]:
        """Case-insensitive search over key, customer and location fields."""
        pass

    async def invalidate(self, license: License) -> None:
        """
        Drop cached copies of ``license`` after a committed write.

        Store-backed repositories hold nothing to drop.
        """

    async def invalidate_all(self) -> None:
        """Drop every cached license after a set-based write."""
