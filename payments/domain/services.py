"""
Payment domain services.

Recording a payment is the only way a paid period starts or grows:
the payment row, the trial conversion, the seat-limit growth and the
subscription extension all commit together.
"""
import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Union

from django.utils import timezone

from core.domain.events import EventBus
from core.domain.exceptions import (
    InitialPaymentExistsError,
    InitialPaymentRequiredError,
    InvalidPaymentError,
    LicenseExpiredError,
    LicenseNotFoundError,
    LicenseRevokedError,
)
from core.domain.time_windows import renewal_window
from core.domain.value_objects import LicenseStatus, PaymentType, SubscriptionStatus
from core.infrastructure.events import event_bus as default_event_bus
from core.metrics import payments_recorded_total
from licenses.domain.license import License
from licenses.ports.license_repository import LicenseRepository
from payments.domain.events import PaymentRecorded
from payments.domain.payment import Payment
from payments.ports.payment_repository import PaymentRepository
from subscriptions.domain.services import annual_fee_default
from subscriptions.domain.subscription import Subscription
from subscriptions.ports.subscription_repository import SubscriptionRepository

logger = logging.getLogger(__name__)


def parse_amount(amount: Union[Decimal, int, float, str]) -> Decimal:
    """
    Convert a caller-supplied amount to a positive Decimal.

    Raises:
        InvalidPaymentError: If the amount is not a number or not above zero
    """
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError) as e:
        raise InvalidPaymentError(f"Payment amount '{amount}' is not a number") from e
    if not value.is_finite() or value <= 0:
        raise InvalidPaymentError()
    return value


class PaymentRenewalService:
    """Interprets payments into subscription, trial and seat changes."""

    def __init__(
        self,
        payment_repository: PaymentRepository,
        license_repository: LicenseRepository,
        subscription_repository: SubscriptionRepository,
        event_bus: Optional[EventBus] = None,
    ):
        self.payment_repository = payment_repository
        self.license_repository = license_repository
        self.subscription_repository = subscription_repository
        self.event_bus = event_bus or default_event_bus

    async def list_for_license(self, license_id: int) -> List[Payment]:
        return await self.payment_repository.list_for_license(license_id)

    async def has_initial_payment(self, license_id: int) -> bool:
        return await self.payment_repository.has_initial_payment(license_id)

    async def _check_allowed(self, license: License, payment_type: PaymentType) -> None:
        if license.status == LicenseStatus.REVOKED:
            raise LicenseRevokedError("Cannot record payments for a revoked license")

        has_initial = await self.payment_repository.has_initial_payment(license.id)

        if payment_type == PaymentType.INITIAL and has_initial:
            raise InitialPaymentExistsError(
                "Initial payment already exists for this license. Please add an annual "
                "subscription payment or user payment instead."
            )
        if payment_type == PaymentType.USER:
            if not has_initial:
                raise InitialPaymentRequiredError(
                    "Initial payment not paid yet. Please make an initial payment first "
                    "before adding user payments."
                )
            if license.status == LicenseStatus.EXPIRED:
                raise LicenseExpiredError(
                    "Cannot add user payments for expired licenses. Please renew the license first."
                )
        if payment_type == PaymentType.ANNUAL and license.is_free_trial and not has_initial:
            raise InitialPaymentRequiredError(
                "Initial payment not paid yet. Please make an initial payment first "
                "before adding annual subscription payments."
            )

    async def _extended_subscription(
        self, license: License, payment_type: PaymentType, now: datetime
    ) -> Optional[Subscription]:
        """
        The subscription window a payment buys.

        Annual payments continue from the current end date, even when it
        already passed. Initial payments continue from the later of now
        and the current end date, so unused trial days carry over.
        Seat payments leave the window alone. A cancelled row is never
        reused; the payment opens a fresh row starting now.
        """
        if payment_type == PaymentType.USER:
            return None

        fee = annual_fee_default()
        latest = await self.subscription_repository.find_latest_for_license(license.id)
        if latest is None or latest.status == SubscriptionStatus.CANCELLED:
            return Subscription.create(license.id, now, renewal_window(now), fee)

        if payment_type == PaymentType.ANNUAL:
            start = latest.end_date
        else:
            start = max(now, latest.end_date)
        return latest.renew(start_date=start, end_date=renewal_window(start), annual_fee=fee)

    async def record_payment(
        self,
        license_id: int,
        amount: Union[Decimal, int, float, str],
        payment_type: Union[PaymentType, str],
        additional_users: Optional[int] = None,
        payment_date: Optional[datetime] = None,
    ) -> Payment:
        """
        Record a payment and apply its effects.

        Args:
            license_id: License being paid for
            amount: Amount paid, must be above zero
            payment_type: initial, annual or user
            additional_users: Seats bought; grows the seat limit
            payment_date: When the payment was made (defaults to now)

        Returns:
            Saved Payment entity

        Raises:
            LicenseNotFoundError: If the license does not exist
            InvalidPaymentError: If the amount or seat count is invalid
            InitialPaymentExistsError: For a second initial payment
            InitialPaymentRequiredError: For user payments, or annual payments on a
                trial, before any initial payment
            LicenseExpiredError: For user payments on an expired license
            LicenseRevokedError: If the license has been revoked
        """
        payment_type = PaymentType(payment_type)
        license = await self.license_repository.find_by_id(license_id)
        if license is None:
            raise LicenseNotFoundError(f"License {license_id} not found")

        payment = Payment.create(
            license_id=license.id,
            amount=parse_amount(amount),
            payment_type=payment_type,
            additional_users=additional_users,
            payment_date=payment_date,
        )
        await self._check_allowed(license, payment_type)

        now = timezone.now()
        subscription = await self._extended_subscription(license, payment_type, now)

        updated = license
        # Trial conversions keep the price recorded at creation.
        if payment_type == PaymentType.INITIAL and not license.is_free_trial:
            updated = updated.with_changes(initial_price=payment.amount)
        updated = updated.convert_from_trial()
        if subscription is not None and updated.status == LicenseStatus.EXPIRED:
            updated = updated.with_changes(status=LicenseStatus.ACTIVE)

        saved = await self.payment_repository.record(
            payment,
            updated,
            subscription,
            seat_limit_increase=additional_users or 0,
        )
        await self.license_repository.invalidate(license)

        payments_recorded_total.labels(payment_type=payment_type.value).inc()
        logger.info(
            "Payment recorded: %s %s for license %s",
            payment_type.value,
            saved.amount,
            license.license_key,
            extra={
                "license_id": license.id,
                "payment_id": saved.id,
                "converted_trial": license.is_free_trial,
                "new_end_date": subscription.end_date.isoformat() if subscription else None,
            },
        )
        await self.event_bus.publish(
            PaymentRecorded(
                payment_id=saved.id,
                license_id=license.id,
                amount=saved.amount,
                payment_type=payment_type.value,
                converted_trial=license.is_free_trial,
                additional_users=additional_users,
            )
        )
        return saved
