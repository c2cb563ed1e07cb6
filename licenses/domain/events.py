"""
License domain events.

Domain events represent something that happened in the license domain.
"""

from datetime import datetime
from typing import List, Optional

from core.domain.events import DomainEvent


class LicenseCreated(DomainEvent):
    """Event raised when a license is created."""

    def __init__(
        self,
        license_id: int,
        license_key: str,
        is_free_trial: bool,
        occurred_at: Optional[datetime] = None,
    ):
        """
        Initialize LicenseCreated event.

        Args:
            license_id: License id
            license_key: Generated license key
            is_free_trial: Whether the license started as a trial
            occurred_at: When the event occurred
        """
        super().__init__(aggregate_id=license_id, occurred_at=occurred_at)
        self.license_id = license_id
        self.license_key = license_key
        self.is_free_trial = is_free_trial


class LicenseUpdated(DomainEvent):
    """Event raised when an administrator edits a license."""

    def __init__(
        self,
        license_id: int,
        changed_fields: List[str],
        occurred_at: Optional[datetime] = None,
    ):
        super().__init__(aggregate_id=license_id, occurred_at=occurred_at)
        self.license_id = license_id
        self.changed_fields = changed_fields


class LicenseRevoked(DomainEvent):
    """Event raised when a license is revoked."""

    def __init__(
        self,
        license_id: int,
        revoked_at: datetime,
        deactivated_activations: int,
        cancelled_subscriptions: int,
    ):
        super().__init__(aggregate_id=license_id, occurred_at=revoked_at)
        self.license_id = license_id
        self.deactivated_activations = deactivated_activations
        self.cancelled_subscriptions = cancelled_subscriptions


class LicenseSuspended(DomainEvent):
    """Event raised when a license is suspended."""

    def __init__(self, license_id: int, occurred_at: Optional[datetime] = None):
        super().__init__(aggregate_id=license_id, occurred_at=occurred_at)
        self.license_id = license_id


class LicenseResumed(DomainEvent):
    """Event raised when a suspended license is resumed."""

    def __init__(self, license_id: int, occurred_at: Optional[datetime] = None):
        super().__init__(aggregate_id=license_id, occurred_at=occurred_at)
        self.license_id = license_id


class LicensesExpired(DomainEvent):
    """Event raised when a sweep moves licenses to expired."""

    def __init__(self, count: int, reason: str, occurred_at: Optional[datetime] = None):
        super().__init__(aggregate_id="sweep", occurred_at=occurred_at)
        self.count = count
        self.reason = reason
