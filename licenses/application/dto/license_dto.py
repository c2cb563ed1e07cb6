"""
License DTOs for caller-facing responses.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional

from licenses.domain.license import License
from licenses.domain.services import LicenseStatusCheck


@dataclass
class LicenseDTO:
    """DTO for license information."""

    id: int
    license_key: str
    status: str
    customer_name: Optional[str]
    customer_phone: Optional[str]
    location_name: Optional[str]
    location_address: Optional[str]
    is_free_trial: bool
    free_trial_end_date: Optional[datetime]
    start_date: Optional[datetime]
    end_date: Optional[datetime]
    seat_count: int
    seat_limit: int
    seats_remaining: int
    initial_price: Decimal
    price_per_seat: Decimal
    product_tag: str
    created_at: datetime

    @classmethod
    def from_entity(cls, license: License) -> "LicenseDTO":
        return cls(
            id=license.id,
            license_key=license.license_key,
            status=license.status.value,
            customer_name=license.customer_name,
            customer_phone=license.customer_phone,
            location_name=license.location_name,
            location_address=license.location_address,
            is_free_trial=license.is_free_trial,
            free_trial_end_date=license.free_trial_end_date,
            start_date=license.start_date,
            end_date=license.end_date,
            seat_count=license.seat_count,
            seat_limit=license.seat_limit,
            seats_remaining=max(license.seat_limit - license.seat_count, 0),
            initial_price=license.initial_price,
            price_per_seat=license.price_per_seat,
            product_tag=license.product_tag,
            created_at=license.created_at,
        )


@dataclass
class LicenseStatusDTO:
    """DTO for license status response."""

    license_key: str
    valid: bool
    status: str
    message: str
    expires_at: Optional[datetime] = None
    grace_period_end: Optional[datetime] = None
    days_remaining: Optional[int] = None
    license: Optional[LicenseDTO] = None

    @classmethod
    def from_check(cls, license_key: str, check: LicenseStatusCheck) -> "LicenseStatusDTO":
        return cls(
            license_key=check.license.license_key if check.license else license_key,
            valid=check.valid,
            status=check.status,
            message=check.message,
            expires_at=check.expires_at,
            grace_period_end=check.grace_period_end,
            days_remaining=check.days_remaining,
            license=LicenseDTO.from_entity(check.license) if check.license else None,
        )


@dataclass
class DashboardStatsDTO:
    """DTO for the administrator dashboard."""

    total_licenses: int
    active_licenses: int
    expired_licenses: int
    revoked_licenses: int
    suspended_licenses: int
    active_activations: int
    by_status: Dict[str, int] = field(default_factory=dict)
