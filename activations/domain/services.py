"""
Activation domain services.

Domain services contain business logic that doesn't naturally
fit within a single entity.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional, Tuple

from django.conf import settings
from django.utils import timezone

from activations.domain.activation import Activation
from activations.domain.events import (
    ActivationDeactivated,
    ActivationRolledBack,
    LicenseActivated,
)
from activations.ports.activation_repository import ActivationRepository
from core.domain.events import EventBus
from core.domain.exceptions import (
    ActivationNotFoundError,
    DeviceAlreadyBoundError,
    DomainException,
    InvalidSeatCountError,
    LicenseExpiredError,
    LicenseNotFoundError,
    LicenseRevokedError,
    LicenseSuspendedError,
    LocationMismatchError,
    LocationNotSetError,
    MissingFieldError,
    ProductMismatchError,
    SeatCountUnderflowError,
    SeatLimitExceededError,
)
from core.domain.time_windows import days_remaining, paid_window
from core.domain.value_objects import HardwareId, LicenseStatus, PaymentType
from core.infrastructure.events import event_bus as default_event_bus
from core.infrastructure.tokens import TokenIssuer
from core.metrics import activation_rollbacks_total, licenses_activated_total
from licenses.domain.license import License
from licenses.domain.license_key import LicenseKey
from licenses.ports.license_repository import LicenseRepository
from subscriptions.domain.services import annual_fee_default
from subscriptions.domain.subscription import Subscription
from subscriptions.ports.subscription_repository import SubscriptionRepository

logger = logging.getLogger(__name__)

EXPIRED_MESSAGE = (
    "License subscription has expired. Please contact administrator to renew your subscription."
)


@dataclass(frozen=True)
class ActivationOutcome:
    """A successful activation."""

    license: License
    activation: Activation
    subscription: Subscription
    token: str
    is_reactivating_active: bool


@dataclass(frozen=True)
class ValidationOutcome:
    """A successful validation."""

    license: License
    subscription: Subscription
    days_remaining: int


@dataclass(frozen=True)
class SeatUsage:
    """Seat counters of a license after a seat operation."""

    seat_count: int
    seat_limit: int

    @property
    def remaining(self) -> int:
        return max(self.seat_limit - self.seat_count, 0)

    @property
    def allowed(self) -> bool:
        return self.seat_count < self.seat_limit


def _hardware_id(raw: Optional[str]) -> str:
    try:
        return HardwareId(raw).value
    except ValueError as e:
        raise MissingFieldError(str(e)) from e


def _reject_blocked(license: License) -> None:
    if license.status == LicenseStatus.REVOKED:
        raise LicenseRevokedError()
    if license.status == LicenseStatus.SUSPENDED:
        raise LicenseSuspendedError()


class ActivationManager:
    """
    Binds devices to licenses and keeps seat counts.

    A device may be actively bound to one license at a time. That rule
    is a check-then-write; two first activations of the same unseen
    device on two licenses may both succeed.
    """

    def __init__(
        self,
        license_repository: LicenseRepository,
        activation_repository: ActivationRepository,
        subscription_repository: SubscriptionRepository,
        token_issuer: TokenIssuer,
        payment_service=None,
        event_bus: Optional[EventBus] = None,
    ):
        """
        Initialize the manager.

        Args:
            license_repository: License store, usually wrapped in a cache
            activation_repository: Activation store
            subscription_repository: Subscription store
            token_issuer: Signs activation tokens
            payment_service: PaymentRenewalService charging extra seats
            event_bus: Bus receiving domain events
        """
        self.license_repository = license_repository
        self.activation_repository = activation_repository
        self.subscription_repository = subscription_repository
        self.token_issuer = token_issuer
        self.payment_service = payment_service
        self.event_bus = event_bus or default_event_bus

    async def _load_by_key(self, license_key: str) -> License:
        key = LicenseKey.parse(license_key).value
        license = await self.license_repository.find_by_key(key)
        if license is None:
            raise LicenseNotFoundError()
        return license

    async def _reload(self, license: License) -> License:
        await self.license_repository.invalidate(license)
        current = await self.license_repository.find_by_id(license.id)
        if current is None:
            raise LicenseNotFoundError()
        return current

    async def _usable_subscription(
        self, license: License, now: datetime
    ) -> Tuple[Optional[Subscription], Optional[Subscription], Optional[Subscription]]:
        """
        The subscription an activation runs under.

        A license with no open active subscription gets a fresh paid
        window; an active row whose end date already passed is expired
        alongside it.

        Returns:
            (current subscription, subscription to create, lapsed row to expire)
        """
        active = await self.subscription_repository.find_active_for_license(license.id)
        if active is not None and active.is_current(now):
            return active, None, None

        created = Subscription.create(
            license_id=license.id,
            start_date=now,
            end_date=paid_window(now),
            annual_fee=annual_fee_default(),
        )
        logger.warning(
            "License %s has no open subscription; opening a paid window until %s",
            license.license_key,
            created.end_date.isoformat(),
            extra={"license_id": license.id, "license_status": license.status.value},
        )
        return None, created, active.expire() if active is not None else None

    async def activate(
        self,
        license_key: str,
        hardware_id: str,
        machine_name: Optional[str] = None,
        product_tag: Optional[str] = None,
    ) -> ActivationOutcome:
        """
        Bind a device to a license.

        Args:
            license_key: Caller-supplied key
            hardware_id: Device fingerprint
            machine_name: Optional device label
            product_tag: Product the caller runs (defaults to the configured tag)

        Returns:
            ActivationOutcome with the signed token

        Raises:
            InvalidLicenseKeyError: If the key is malformed
            LicenseNotFoundError: If the key is unknown
            LicenseRevokedError, LicenseSuspendedError: If the license is blocked
            LocationNotSetError: If the license has no location yet
            ProductMismatchError: If the license is for another product
            DeviceAlreadyBoundError: If the device is bound to another license
            DuplicateActivationError: If a concurrent call bound the pair first
        """
        license = await self._load_by_key(license_key)
        hardware_id = _hardware_id(hardware_id)
        _reject_blocked(license)

        if not license.has_location:
            raise LocationNotSetError()

        expected_tag = product_tag or getattr(settings, "LICENSE_DEFAULT_PRODUCT_TAG", "grocery")
        if license.product_tag != expected_tag:
            raise ProductMismatchError(
                f"This license is not valid for {expected_tag} POS. License version is "
                f"'{license.product_tag}', but {expected_tag} POS requires '{expected_tag}' version."
            )

        now = timezone.now()
        current, created, lapsed = await self._usable_subscription(license, now)

        existing = await self.activation_repository.find_by_license_and_hardware(
            license.id, hardware_id
        )
        if existing is not None and existing.is_active:
            activation = existing.refresh(machine_name)
            outcome = "refreshed"
        elif existing is not None:
            activation = existing.reactivate(machine_name)
            outcome = "reactivated"
        else:
            activation = Activation.create(license.id, hardware_id, machine_name)
            outcome = "activated"
        is_reactivating_active = outcome == "refreshed"

        # A binding going live on a license with no seats claims the default user.
        claim_first_seat = not is_reactivating_active and license.seat_count == 0

        try:
            saved = await self.activation_repository.bind(
                activation,
                claim_first_seat=claim_first_seat,
                subscription=created,
                lapsed=lapsed,
            )
        except DeviceAlreadyBoundError:
            logger.warning(
                "Activation blocked: device already bound to another license",
                extra={"hardware_id": hardware_id, "license_id": license.id},
            )
            raise
        subscription = current
        if created is not None:
            subscription = await self.subscription_repository.find_active_for_license(license.id)
        license = await self._reload(license)

        token = self.token_issuer.sign(
            {
                "license_id": license.id,
                "license_key": license.license_key,
                "hardware_id": hardware_id,
            },
            ttl=timedelta(days=getattr(settings, "LICENSE_TOKEN_TTL_DAYS", 365)),
        )

        licenses_activated_total.labels(outcome=outcome).inc()
        logger.info(
            "License %s: %s",
            outcome,
            license.license_key,
            extra={
                "license_id": license.id,
                "activation_id": saved.id,
                "hardware_id": hardware_id,
                "machine_name": machine_name,
            },
        )
        await self.event_bus.publish(
            LicenseActivated(
                activation_id=saved.id,
                license_id=license.id,
                hardware_id=hardware_id,
                is_reactivation=existing is not None,
            )
        )
        return ActivationOutcome(
            license=license,
            activation=saved,
            subscription=subscription,
            token=token,
            is_reactivating_active=is_reactivating_active,
        )

    async def validate(
        self,
        license_key: str,
        hardware_id: Optional[str] = None,
        as_of: Optional[datetime] = None,
        location_address: Optional[str] = None,
    ) -> ValidationOutcome:
        """
        Check that a license may keep running.

        The device is advisory: a matching active binding gets its last
        validation time refreshed, but a missing one does not fail.

        Raises:
            InvalidLicenseKeyError: If the key is malformed
            LicenseNotFoundError: If the key is unknown
            LicenseRevokedError, LicenseSuspendedError: If the license is blocked
            LocationMismatchError: If ``location_address`` differs from the record
            LicenseExpiredError: If no subscription window covers ``as_of``
        """
        license = await self._load_by_key(license_key)
        _reject_blocked(license)

        if hardware_id:
            activation = await self.activation_repository.find_by_license_and_hardware(
                license.id, hardware_id
            )
            if activation is not None and activation.is_active:
                await self.activation_repository.save(activation.touch())

        if location_address and not license.matches_address(location_address):
            raise LocationMismatchError()

        as_of = as_of or timezone.now()
        active = await self.subscription_repository.find_active_for_license(license.id)
        if active is None:
            latest = await self.subscription_repository.find_latest_for_license(license.id)
            raise LicenseExpiredError(
                EXPIRED_MESSAGE, expires_at=latest.end_date if latest else None
            )
        if as_of > active.end_date:
            raise LicenseExpiredError(EXPIRED_MESSAGE, expires_at=active.end_date)

        return ValidationOutcome(
            license=license,
            subscription=active,
            days_remaining=days_remaining(active.end_date, as_of),
        )

    async def rollback_activation(self, license_key: str, hardware_id: str) -> bool:
        """
        Undo a successful activation after the caller's own setup failed.

        Returns:
            True if the license's seat count was reset to 0

        Raises:
            ActivationNotFoundError: If the pair has no active binding
        """
        license = await self._load_by_key(license_key)
        activation = await self.activation_repository.find_by_license_and_hardware(
            license.id, _hardware_id(hardware_id)
        )
        if activation is None or not activation.is_active:
            raise ActivationNotFoundError("No active activation found to roll back")

        seat_count_reset = await self.activation_repository.roll_back(activation)
        await self.license_repository.invalidate(license)

        activation_rollbacks_total.inc()
        logger.info(
            "Activation rolled back: %s",
            license.license_key,
            extra={
                "license_id": license.id,
                "activation_id": activation.id,
                "seat_count_reset": seat_count_reset,
            },
        )
        await self.event_bus.publish(
            ActivationRolledBack(
                activation_id=activation.id,
                license_id=license.id,
                hardware_id=activation.hardware_id,
                seat_count_reset=seat_count_reset,
            )
        )
        return seat_count_reset

    async def check_seat_allowed(self, license_key: str) -> SeatUsage:
        """Current seat counters; ``allowed`` tells whether one more fits."""
        license = await self._load_by_key(license_key)
        return SeatUsage(license.seat_count, license.seat_limit)

    async def _charge_extra_seat(self, license: License) -> None:
        """
        Bill one extra seat when the license has been paid for.

        Failures are logged; the seat itself was already granted.
        """
        if self.payment_service is None:
            return
        price = Decimal(license.price_per_seat or 0)
        has_initial = await self.payment_service.has_initial_payment(license.id)
        if not has_initial or price <= 0:
            logger.warning(
                "Skipping payment for additional user on %s: %s",
                license.license_key,
                "no initial payment found" if not has_initial else "no price per user configured",
            )
            return
        try:
            await self.payment_service.record_payment(
                license.id, price, PaymentType.USER, additional_users=1
            )
        except DomainException as e:
            logger.warning(
                "Failed to record payment for additional user on %s: %s",
                license.license_key,
                e.message,
            )

    async def increment_seat(self, license_key: str) -> SeatUsage:
        """
        Claim one more seat.

        Raises:
            LicenseRevokedError, LicenseSuspendedError: If the license is blocked
            SeatLimitExceededError: If every seat is taken
        """
        license = await self._load_by_key(license_key)
        _reject_blocked(license)

        updated = await self.license_repository.increment_seat_count(license.id)
        if updated is None:
            raise SeatLimitExceededError(
                f"User limit reached ({license.seat_count}/{license.seat_limit}). "
                "Cannot create more users."
            )
        await self.license_repository.invalidate(license)
        logger.info(
            "Seat added on %s: %s/%s",
            license.license_key,
            updated.seat_count,
            updated.seat_limit,
        )

        await self._charge_extra_seat(updated)
        current = await self._reload(updated)
        return SeatUsage(current.seat_count, current.seat_limit)

    async def decrement_seat(self, license_key: str) -> SeatUsage:
        """
        Release one seat.

        Raises:
            SeatCountUnderflowError: If the count is already 0
        """
        license = await self._load_by_key(license_key)
        updated = await self.license_repository.decrement_seat_count(license.id)
        if updated is None:
            raise SeatCountUnderflowError()
        await self.license_repository.invalidate(license)
        return SeatUsage(updated.seat_count, updated.seat_limit)

    async def sync_seat(self, license_key: str, actual_count: int) -> SeatUsage:
        """
        Overwrite the seat count with the caller's own tally.

        Raises:
            InvalidSeatCountError: If ``actual_count`` is negative
        """
        if actual_count is None or actual_count < 0:
            raise InvalidSeatCountError("Actual user count cannot be negative")
        license = await self._load_by_key(license_key)
        updated = await self.license_repository.set_seat_count(license.id, actual_count)
        if updated is None:
            raise LicenseNotFoundError()
        await self.license_repository.invalidate(license)
        logger.info(
            "Seat count synced on %s: %s -> %s",
            license.license_key,
            license.seat_count,
            updated.seat_count,
        )
        return SeatUsage(updated.seat_count, updated.seat_limit)

    async def deactivate(self, activation_id: int) -> Activation:
        """
        Deactivate one binding.

        Raises:
            ActivationNotFoundError: If the activation does not exist
        """
        activation = await self.activation_repository.find_by_id(activation_id)
        if activation is None:
            raise ActivationNotFoundError(f"Activation {activation_id} not found")
        saved = await self.activation_repository.save(activation.deactivate())

        license = await self.license_repository.find_by_id(saved.license_id)
        if license is not None:
            await self.license_repository.invalidate(license)
        await self.event_bus.publish(
            ActivationDeactivated(activation_id=saved.id, license_id=saved.license_id)
        )
        return saved

    async def deactivate_all(self, license_id: int) -> int:
        """
        Deactivate every binding of a license.

        Returns:
            Number of bindings deactivated
        """
        license = await self.license_repository.find_by_id(license_id)
        if license is None:
            raise LicenseNotFoundError(f"License {license_id} not found")
        count = await self.activation_repository.deactivate_all_for_license(license_id)
        await self.license_repository.invalidate(license)
        logger.info("Deactivated %s activation(s) of %s", count, license.license_key)
        return count

    async def list_for_license(self, license_id: int) -> List[Activation]:
        return await self.activation_repository.list_for_license(license_id)
