"""
License domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from django.conf import settings
from django.utils import timezone

from core.domain.events import EventBus
from core.domain.exceptions import (
    DuplicateLicenseError,
    InvalidLicenseStatusError,
    LicenseNotFoundError,
    MissingFieldError,
    SeatLimitExceededError,
)
from core.domain.time_windows import days_remaining, end_of_day, paid_window, trial_window
from core.domain.value_objects import (
    LicenseStatus,
    PhoneNumber,
    SubscriptionStatus,
    normalize_contact,
    normalize_location,
)
from core.infrastructure.concurrency import count_successes, run_bounded
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import licenses_created_total, licenses_expired_total, licenses_revoked_total
from licenses.domain.events import (
    LicenseCreated,
    LicenseResumed,
    LicenseRevoked,
    LicensesExpired,
    LicenseSuspended,
    LicenseUpdated,
)
from licenses.domain.license import License
from licenses.domain.license_key import generate_unique_license_key, normalize_license_key
from licenses.ports.license_repository import LicenseRepository
from subscriptions.ports.subscription_repository import SubscriptionRepository

logger = logging.getLogger(__name__)

# Fields an administrator may edit through ``update``.
EDITABLE_FIELDS = frozenset(
    {
        "customer_name",
        "customer_phone",
        "location_name",
        "location_address",
        "seat_limit",
        "initial_price",
        "price_per_seat",
        "product_tag",
        "status",
    }
)


def _setting_decimal(name: str, default: Any) -> Decimal:
    return Decimal(str(getattr(settings, name, default)))


def normalize_phone(raw: Optional[str]) -> Optional[str]:
    """Delivery form of a phone, or None when nothing usable was given."""
    if raw is None or not raw.strip():
        return None
    try:
        return PhoneNumber.parse(raw).value
    except ValueError as e:
        raise MissingFieldError(f"Customer phone '{raw}' is not a valid phone number") from e


@dataclass(frozen=True)
class LicenseStatusCheck:
    """Outcome of a status check; found-but-invalid licenses keep their details."""

    valid: bool
    status: str
    message: str
    license: Optional[License] = None
    expires_at: Optional[datetime] = None
    grace_period_end: Optional[datetime] = None
    days_remaining: Optional[int] = None


class LicenseLifecycleManager:
    """
    Domain service for managing license lifecycle.

    Owns creation, status transitions and duplicate prevention. Every
    mutation invalidates the license caches after its transaction has
    committed.
    """

    def __init__(
        self,
        license_repository: LicenseRepository,
        subscription_repository: SubscriptionRepository,
        notifier=None,
        event_bus: Optional[EventBus] = None,
    ):
        """
        Initialize the manager.

        Args:
            license_repository: License store, usually wrapped in a cache
            subscription_repository: Subscription store
            notifier: Optional LicenseNotifier for best-effort messages
            event_bus: Bus receiving domain events
        """
        self.license_repository = license_repository
        self.subscription_repository = subscription_repository
        self.notifier = notifier
        self.event_bus = event_bus or default_event_bus

    async def _ensure_unique_location(
        self,
        customer_phone: Optional[str],
        location_name: Optional[str],
        exclude_id: Optional[int] = None,
    ) -> None:
        if not customer_phone or not location_name:
            return
        existing = await self.license_repository.find_duplicate(
            normalize_contact(customer_phone), normalize_location(location_name)
        )
        if existing is not None and existing.id != exclude_id:
            raise DuplicateLicenseError(
                f'A license already exists for phone "{customer_phone}" and '
                f'branch/location "{location_name}". Each branch requires a unique license.'
            )

    async def create(
        self,
        customer_name: Optional[str],
        customer_phone: Optional[str],
        location_name: Optional[str],
        location_address: Optional[str],
        is_free_trial: bool = False,
        initial_price: Optional[Decimal] = None,
        annual_price: Optional[Decimal] = None,
        price_per_seat: Optional[Decimal] = None,
        seat_limit: Optional[int] = None,
        product_tag: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> License:
        """
        Create a license with its first subscription.

        Paid licenses also get their initial payment in the same
        transaction.

        Returns:
            Saved License entity

        Raises:
            DuplicateLicenseError: If the contact already has a license for this location
            LicenseKeyGenerationError: If no unused key could be generated
        """
        phone = normalize_phone(customer_phone)
        await self._ensure_unique_location(phone, location_name)

        license_key = await generate_unique_license_key(self.license_repository.key_exists)

        # Zero is a valid explicit price.
        if initial_price is None:
            initial_price = _setting_decimal("LICENSE_INITIAL_PRICE", 350)
        if annual_price is None:
            annual_price = _setting_decimal("LICENSE_ANNUAL_PRICE", 50)
        if price_per_seat is None:
            price_per_seat = _setting_decimal("LICENSE_PRICE_PER_SEAT", 25)
        if seat_limit is None:
            seat_limit = getattr(settings, "LICENSE_DEFAULT_SEAT_LIMIT", 2)

        start = start_date or timezone.now()
        if end_date is not None:
            end = end_of_day(end_date)
        elif is_free_trial:
            end = trial_window(start, getattr(settings, "LICENSE_FREE_TRIAL_DAYS", 10))
        else:
            end = paid_window(start)

        license = License.create(
            license_key=license_key,
            customer_name=customer_name,
            customer_phone=phone,
            location_name=location_name,
            location_address=location_address,
            initial_price=Decimal(initial_price),
            price_per_seat=Decimal(price_per_seat),
            start_date=start,
            end_date=end,
            is_free_trial=is_free_trial,
            seat_limit=seat_limit,
            product_tag=product_tag or getattr(settings, "LICENSE_DEFAULT_PRODUCT_TAG", "grocery"),
        )
        saved = await self.license_repository.create(
            license,
            annual_fee=Decimal(annual_price),
            initial_payment=None if is_free_trial else Decimal(initial_price),
        )

        await self.license_repository.invalidate(saved)
        licenses_created_total.labels(trial=str(is_free_trial).lower()).inc()
        logger.info(
            "License created: %s",
            saved.license_key,
            extra={"license_id": saved.id, "is_free_trial": is_free_trial},
        )
        await self.event_bus.publish(
            LicenseCreated(
                license_id=saved.id,
                license_key=saved.license_key,
                is_free_trial=saved.is_free_trial,
            )
        )

        if self.notifier is not None:
            await self.notifier.send_license_details(saved)
        return saved

    async def find_by_key(self, license_key: str) -> Optional[License]:
        """Cache-through lookup by a caller-supplied key."""
        return await self.license_repository.find_by_key(normalize_license_key(license_key))

    async def find_by_id(self, license_id: int) -> Optional[License]:
        return await self.license_repository.find_by_id(license_id)

    async def get(self, license_id: int) -> License:
        """
        Load a license or fail.

        Raises:
            LicenseNotFoundError: If no license has this id
        """
        license = await self.find_by_id(license_id)
        if license is None:
            raise LicenseNotFoundError(f"License {license_id} not found")
        return license

    async def check_status(
        self, license_key: str, as_of: Optional[datetime] = None
    ) -> LicenseStatusCheck:
        """
        Report whether a license currently permits use.

        Args:
            license_key: Caller-supplied key
            as_of: Instant to evaluate at (defaults to now)

        Returns:
            LicenseStatusCheck; unknown keys report status ``not_found``
        """
        as_of = as_of or timezone.now()
        license = await self.find_by_key(license_key)
        if license is None:
            return LicenseStatusCheck(False, "not_found", "License key not found")

        if license.status == LicenseStatus.REVOKED:
            return LicenseStatusCheck(False, "revoked", "License has been revoked", license)
        if license.status == LicenseStatus.SUSPENDED:
            return LicenseStatusCheck(False, "suspended", "License is currently suspended", license)

        active = await self.subscription_repository.find_active_for_license(license.id)
        if active is not None and active.is_current(as_of):
            return LicenseStatusCheck(
                valid=True,
                status="active",
                message="License is active and valid",
                license=license,
                expires_at=active.end_date,
                grace_period_end=active.grace_period_end,
                days_remaining=days_remaining(active.end_date, as_of),
            )

        latest = active or await self.subscription_repository.find_latest_for_license(license.id)
        if (
            latest is not None
            and latest.status != SubscriptionStatus.CANCELLED
            and latest.in_grace_period(as_of)
        ):
            return LicenseStatusCheck(
                valid=True,
                status="grace_period",
                message="License is in grace period",
                license=license,
                expires_at=latest.end_date,
                grace_period_end=latest.grace_period_end,
                days_remaining=0,
            )

        return LicenseStatusCheck(
            valid=False,
            status="expired",
            message="License subscription has expired",
            license=license,
            expires_at=latest.end_date if latest else None,
            grace_period_end=latest.grace_period_end if latest else None,
        )

    async def revoke(self, license_id: int) -> License:
        """
        Revoke a license.

        Deactivates its devices and cancels its active subscriptions in
        the same transaction.

        Raises:
            LicenseNotFoundError: If no license has this id
        """
        return await self._revoke(await self.get(license_id))

    async def _revoke(self, license: License, edited: Optional[License] = None) -> License:
        revoked_at = timezone.now()
        deactivated, cancelled = await self.license_repository.revoke(
            license.id, revoked_at, edited=edited
        )
        await self.license_repository.invalidate(license)

        licenses_revoked_total.inc()
        logger.info(
            "License revoked: %s (%s activation(s), %s subscription(s))",
            license.license_key,
            deactivated,
            cancelled,
            extra={"license_id": license.id},
        )
        await self.event_bus.publish(
            LicenseRevoked(
                license_id=license.id,
                revoked_at=revoked_at,
                deactivated_activations=deactivated,
                cancelled_subscriptions=cancelled,
            )
        )
        return await self.get(license.id)

    async def revoke_by_key(self, license_key: str) -> License:
        license = await self.find_by_key(license_key)
        if license is None:
            raise LicenseNotFoundError()
        return await self.revoke(license.id)

    async def suspend(self, license_id: int) -> License:
        """
        Suspend a license.

        Raises:
            InvalidLicenseStatusError: If the license is revoked
        """
        license = await self.get(license_id)
        saved = await self.license_repository.save(license.suspend())
        await self.license_repository.invalidate(saved)
        await self.event_bus.publish(LicenseSuspended(license_id=saved.id))
        logger.info("License suspended: %s", saved.license_key)
        return saved

    async def resume(self, license_id: int) -> License:
        """
        Resume a suspended license.

        Raises:
            InvalidLicenseStatusError: If the license is not suspended
        """
        license = await self.get(license_id)
        saved = await self.license_repository.save(license.resume())
        await self.license_repository.invalidate(saved)
        await self.event_bus.publish(LicenseResumed(license_id=saved.id))
        logger.info("License resumed: %s", saved.license_key)
        return saved

    async def update(self, license_id: int, changes: Dict[str, Any]) -> License:
        """
        Apply an administrator's edits.

        Args:
            license_id: License id
            changes: Field name to new value; unknown fields are rejected

        Returns:
            Updated License entity

        Raises:
            MissingFieldError: If a field is not editable
            DuplicateLicenseError: If the edit collides with another license
            SeatLimitExceededError: If the new limit is below the seat count
        """
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise MissingFieldError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

        license = await self.get(license_id)
        changes = dict(changes)

        status = changes.pop("status", None)
        revoking = False
        if status is not None:
            status = LicenseStatus(status)
            revoking = status == LicenseStatus.REVOKED
            if license.status == LicenseStatus.REVOKED and not revoking:
                raise InvalidLicenseStatusError("A revoked license cannot change status")
            if not revoking:
                changes["status"] = status

        if "customer_phone" in changes:
            changes["customer_phone"] = normalize_phone(changes["customer_phone"])
        for price_field in ("initial_price", "price_per_seat"):
            if changes.get(price_field) is not None:
                changes[price_field] = Decimal(str(changes[price_field]))

        if "seat_limit" in changes and changes["seat_limit"] < license.seat_count:
            raise SeatLimitExceededError(
                f"Seat limit cannot be lower than the current seat count ({license.seat_count})"
            )

        if "customer_phone" in changes or "location_name" in changes:
            await self._ensure_unique_location(
                changes.get("customer_phone", license.customer_phone),
                changes.get("location_name", license.location_name),
                exclude_id=license.id,
            )

        if revoking:
            # Edits and the revocation commit together.
            edited = license.with_changes(**changes) if changes else None
            saved = await self._revoke(license, edited=edited)
        else:
            saved = await self.license_repository.save(license.with_changes(**changes))
            await self.license_repository.invalidate(saved)
        if changes or not revoking:
            await self.event_bus.publish(
                LicenseUpdated(license_id=saved.id, changed_fields=sorted(changes))
            )
        return saved

    async def update_expired_licenses(self, now: Optional[datetime] = None) -> int:
        """
        Flip active licenses whose subscriptions have all lapsed to expired.

        Set-based and idempotent; meant for the scheduled sweep only.

        Returns:
            Number of licenses expired
        """
        now = now or timezone.now()
        license_ids = await self.license_repository.expire_lapsed(now)
        if license_ids:
            await self.license_repository.invalidate_all()
            licenses_expired_total.labels(reason="subscription").inc(len(license_ids))
            await self.event_bus.publish(LicensesExpired(count=len(license_ids), reason="subscription"))
        logger.info("Expired %s license(s) with lapsed subscriptions", len(license_ids))
        return len(license_ids)

    async def expire_free_trial_licenses(
        self, now: Optional[datetime] = None, limit: int = 5, timeout: Optional[float] = None
    ) -> int:
        """
        Expire unpaid trials past their end date and notify their owners.

        Notices are sent best-effort after the transaction commits.

        Returns:
            Number of licenses expired
        """
        now = now or timezone.now()
        trials = await self.license_repository.find_trials_to_expire(now)
        if not trials:
            return 0

        expired = await self.license_repository.expire_trials([t.id for t in trials], now)
        await self.license_repository.invalidate_all()
        licenses_expired_total.labels(reason="trial").inc(expired)
        await self.event_bus.publish(LicensesExpired(count=expired, reason="trial"))
        logger.info("Expired %s free trial license(s)", expired)

        if self.notifier is not None:
            await self._notify_expired(trials, limit, timeout)
        return expired

    async def _notify_expired(
        self, licenses: List[License], limit: int, timeout: Optional[float]
    ) -> int:
        tasks = [
            (lambda lic=lic: self.notifier.send_expiration_notice(
                lic, lic.free_trial_end_date or lic.end_date or timezone.now()
            ))
            for lic in licenses
            if lic.customer_phone
        ]
        outcomes = await run_bounded(tasks, limit, timeout)
        sent = count_successes(outcomes)
        logger.info("Sent %s of %s trial expiration notice(s)", sent, len(tasks))
        return sent
