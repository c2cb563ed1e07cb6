"""
Activation DTOs for caller-facing responses.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from activations.domain.activation import Activation


@dataclass
class ActivationDTO:
    """DTO for activation information."""

    id: int
    license_id: int
    hardware_id: str
    machine_name: Optional[str]
    activated_at: datetime
    last_validation: datetime
    is_active: bool

    @classmethod
    def from_entity(cls, activation: Activation) -> "ActivationDTO":
        return cls(
            id=activation.id,
            license_id=activation.license_id,
            hardware_id=activation.hardware_id,
            machine_name=activation.machine_name,
            activated_at=activation.activated_at,
            last_validation=activation.last_validation,
            is_active=activation.is_active,
        )


@dataclass
class ActivateLicenseResponseDTO:
    """DTO for activate license response."""

    success: bool
    message: str
    expires_at: Optional[datetime] = None
    grace_period_end: Optional[datetime] = None
    token: Optional[str] = None
    location_name: Optional[str] = None
    location_address: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    is_reactivating_active: bool = False


@dataclass
class ValidateLicenseResponseDTO:
    """DTO for validate license response."""

    valid: bool
    message: str
    expires_at: Optional[datetime] = None
    grace_period_end: Optional[datetime] = None
    days_remaining: Optional[int] = None


@dataclass
class RollbackActivationResponseDTO:
    """DTO for rollback response."""

    success: bool
    message: str
    seat_count_reset: bool = False


@dataclass
class SeatResponseDTO:
    """DTO for seat operations."""

    success: bool
    seat_count: int
    seat_limit: int
    message: str
