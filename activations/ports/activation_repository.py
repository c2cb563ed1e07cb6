"""
Activation repository port (interface).

This defines the contract for activation persistence operations.
Implementations are in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from activations.domain.activation import Activation
from subscriptions.domain.subscription import Subscription


class ActivationRepository(ABC):
    """
    Abstract repository for Activation entities.

    This is a port in hexagonal architecture - it defines
    what operations are available, not how they're implemented.
    """

    @abstractmethod
    async def save(self, activation: Activation) -> Activation:
        """
        Save an activation entity.

        Args:
            activation: Activation entity to save

        Returns:
            Saved activation entity

        Raises:
            DuplicateActivationError: If the (license, hardware) pair already exists
        """
        pass

    @abstractmethod
    async def find_by_id(self, activation_id: int) -> Optional[Activation]:
        """
        Find an activation by ID.

        Args:
            activation_id: Activation id

        Returns:
            Activation entity or None if not found
        """
        pass

    @abstractmethod
    async def find_by_license_and_hardware(
        self, license_id: int, hardware_id: str
    ) -> Optional[Activation]:
        """
        Find the activation row for a (license, hardware) pair.

        Args:
            license_id: License id
            hardware_id: Device fingerprint

        Returns:
            Activation entity or None if the pair was never bound
        """
        pass

    @abstractmethod
    async def list_for_license(self, license_id: int) -> List[Activation]:
        """
        Find all activations for a license.

        Args:
            license_id: License id

        Returns:
            List of Activation entities, newest first
        """
        pass

    @abstractmethod
    async def count_active(self) -> int:
        """Number of active bindings across all licenses."""
        pass

    @abstractmethod
    async def bind(
        self,
        activation: Activation,
        claim_first_seat: bool,
        subscription: Optional[Subscription] = None,
        lapsed: Optional[Subscription] = None,
    ) -> Activation:
        """
        Persist an activation and its side effects in one transaction.

        The device lock is read inside the same transaction: the device must
        not be actively bound to any other license.

        Args:
            activation: New or updated activation
            claim_first_seat: Set the license's seat count to 1 if it is 0
            subscription: Subscription to create when the license has none active;
                an expired license is reopened with it
            lapsed: Active subscription past its end date, saved as expired

        Returns:
            Saved Activation entity

        Raises:
            DeviceAlreadyBoundError: If the device is actively bound to another license
            DuplicateActivationError: If a concurrent caller bound the same pair first
        """
        pass

    @abstractmethod
    async def roll_back(self, activation: Activation) -> bool:
        """
        Deactivate ``activation`` and free the license's first seat.

        In one transaction the activation is made inactive and, if the
        license's seat count is 1 or less, the count is reset to 0.

        Returns:
            True if the seat count was reset
        """
        pass

    @abstractmethod
    async def deactivate_all_for_license(self, license_id: int) -> int:
        """
        Deactivate every active binding of a license.

        Returns:
            Number of activations deactivated
        """
        pass
