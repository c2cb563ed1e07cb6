"""
Activation domain entity.

This is the core domain entity representing a device binding.
It contains business logic and is independent of infrastructure.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from django.utils import timezone

from core.domain.value_objects import HardwareId


@dataclass(frozen=True)
class Activation:
    """
    Activation domain entity.

    Binds one license to one physical device. A (license, hardware)
    pair has at most one row; reactivation toggles that row instead of
    inserting a new one.
    """

    id: Optional[int]
    license_id: int
    hardware_id: str
    machine_name: Optional[str]
    activated_at: datetime
    last_validation: datetime
    is_active: bool

    def __post_init__(self):
        """Validate activation entity."""
        if not self.license_id:
            raise ValueError("License ID is required")
        HardwareId(self.hardware_id)

    @classmethod
    def create(
        cls,
        license_id: int,
        hardware_id: str,
        machine_name: Optional[str] = None,
    ) -> "Activation":
        """
        Create a new Activation entity.

        Args:
            license_id: License id
            hardware_id: Device fingerprint
            machine_name: Optional device label

        Returns:
            Activation entity instance
        """
        now = timezone.now()
        return cls(
            id=None,
            license_id=license_id,
            hardware_id=hardware_id,
            machine_name=machine_name,
            activated_at=now,
            last_validation=now,
            is_active=True,
        )

    def refresh(self, machine_name: Optional[str] = None) -> "Activation":
        """
        Record a repeat activation of an already-active binding.

        The original ``activated_at`` is preserved.
        """
        return replace(
            self,
            machine_name=machine_name or self.machine_name,
            last_validation=timezone.now(),
        )

    def reactivate(self, machine_name: Optional[str] = None) -> "Activation":
        """
        Create a new Activation instance with reactivated status.

        Returns:
            New Activation instance with active status and a fresh activation time
        """
        now = timezone.now()
        return replace(
            self,
            machine_name=machine_name or self.machine_name,
            activated_at=now,
            last_validation=now,
            is_active=True,
        )

    def touch(self) -> "Activation":
        """Record a successful validation."""
        return replace(self, last_validation=timezone.now())

    def deactivate(self) -> "Activation":
        """
        Create a new Activation instance with deactivated status.

        Returns:
            New Activation instance with deactivated status
        """
        if not self.is_active:
            return self
        return replace(self, is_active=False)
