"""
Activation domain events.
"""

from datetime import datetime
from typing import Optional

from core.domain.events import DomainEvent


class LicenseActivated(DomainEvent):
    """Event raised when a device is bound to a license."""

    def __init__(
        self,
        activation_id: int,
        license_id: int,
        hardware_id: str,
        is_reactivation: bool,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseActivated event.

        Args:
            activation_id: Activation id
            license_id: License id
            hardware_id: Device fingerprint
            is_reactivation: True if the binding already existed
            occurred_at: When the event occurred
        """
        super().__init__(aggregate_id=license_id, occurred_at=occurred_at)
        self.activation_id = activation_id
        self.license_id = license_id
        self.hardware_id = hardware_id
        self.is_reactivation = is_reactivation


class ActivationRolledBack(DomainEvent):
    """Event raised when a caller undoes a successful activation."""

    def __init__(
        self,
        activation_id: int,
        license_id: int,
        hardware_id: str,
        seat_count_reset: bool,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(aggregate_id=license_id, occurred_at=occurred_at)
        self.activation_id = activation_id
        self.license_id = license_id
        self.hardware_id = hardware_id
        self.seat_count_reset = seat_count_reset


class ActivationDeactivated(DomainEvent):
    """Event raised when an administrator deactivates a device binding."""

    def __init__(
        self,
        activation_id: int,
        license_id: int,
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(aggregate_id=license_id, occurred_at=occurred_at)
        self.activation_id = activation_id
        self.license_id = license_id
