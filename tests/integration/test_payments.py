"""
Integration tests for payment-driven renewals and subscription administration.
"""
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from core.domain.exceptions import (
    InitialPaymentExistsError,
    InitialPaymentRequiredError,
    InvalidPaymentError,
    InvalidSubscriptionStatusError,
    LicenseExpiredError,
    LicenseRevokedError,
    SubscriptionNotFoundError,
)
from core.domain.time_windows import renewal_window
from core.domain.value_objects import LicenseStatus, SubscriptionStatus
from payments.application.commands.record_payment import RecordPaymentCommand
from subscriptions.application.commands.create_subscription import CreateSubscriptionCommand
from subscriptions.application.commands.renew_subscription import RenewSubscriptionCommand


async def make_expired_license(services, make_license):
    """A paid license whose window ended two days ago, swept to expired."""
    now = timezone.now()
    license = await make_license(
        start_date=now - timedelta(days=40), end_date=now - timedelta(days=2)
    )
    await services.sweeper.run_subscription_sweep()
    return await services.lifecycle_manager.get(license.id)


@pytest.mark.django_db(transaction=True)
@pytest.mark.integration
@pytest.mark.asyncio
class TestRecordPayment:
    """Tests for recording payments."""

    async def test_annual_payment_extends_from_end_date(self, services, make_license):
        """Test an annual payment adds a year to the current end date, not to now."""
        license = await make_license()

        dto = await services.record_payment.handle(
            RecordPaymentCommand(license_id=license.id, amount="50", payment_type="annual")
        )

        assert dto.payment_type == "annual"
        assert dto.is_annual_subscription is True
        subscription = await services.subscription_repository.find_active_for_license(license.id)
        assert subscription.end_date == renewal_window(license.end_date)
        current = await services.lifecycle_manager.get(license.id)
        assert current.end_date == subscription.end_date

    async def test_user_payment_grows_seat_limit(self, services, make_license):
        license = await make_license()

        await services.record_payment.handle(
            RecordPaymentCommand(
                license_id=license.id, amount=50, payment_type="user", additional_users=2
            )
        )

        current = await services.lifecycle_manager.get(license.id)
        assert current.seat_limit == 4
        assert current.end_date == license.end_date

    async def test_second_initial_payment_rejected(self, services, make_license):
        license = await make_license()

        with pytest.raises(InitialPaymentExistsError):
            await services.record_payment.handle(
                RecordPaymentCommand(license_id=license.id, amount="350", payment_type="initial")
            )

    async def test_trial_needs_initial_payment_first(self, services, make_license):
        license = await make_license(is_free_trial=True)

        with pytest.raises(InitialPaymentRequiredError):
            await services.payment_service.record_payment(
                license.id, "25", "user", additional_users=1
            )
        with pytest.raises(InitialPaymentRequiredError):
            await services.payment_service.record_payment(license.id, "50", "annual")
        assert await services.payment_service.list_for_license(license.id) == []

    async def test_invalid_amount(self, services, make_license):
        license = await make_license()

        with pytest.raises(InvalidPaymentError):
            await services.payment_service.record_payment(license.id, "0", "annual")
        with pytest.raises(InvalidPaymentError):
            await services.payment_service.record_payment(license.id, "lots", "annual")

    async def test_user_payment_on_expired_license_rejected(self, services, make_license):
        license = await make_expired_license(services, make_license)
        assert license.status == LicenseStatus.EXPIRED

        with pytest.raises(LicenseExpiredError):
            await services.payment_service.record_payment(
                license.id, "25", "user", additional_users=1
            )

    async def test_annual_payment_reopens_expired_license(self, services, make_license):
        """Test paying for a lapsed license makes it usable again."""
        license = await make_expired_license(services, make_license)

        await services.payment_service.record_payment(license.id, "50", "annual")

        current = await services.lifecycle_manager.get(license.id)
        assert current.status == LicenseStatus.ACTIVE
        assert current.end_date == renewal_window(license.end_date)
        check = await services.lifecycle_manager.check_status(current.license_key)
        assert check.valid is True

    async def test_payment_ledger(self, services, make_license):
        license = await make_license()
        await services.payment_service.record_payment(license.id, Decimal("50"), "annual")

        payments = await services.list_payments.handle(license.id)

        assert sorted(p.payment_type for p in payments) == ["annual", "initial"]

    async def test_payment_on_revoked_license_rejected(self, services, make_license):
        """Test a revoked license takes no payments and its cancelled window stays put."""
        license = await make_license()
        await services.lifecycle_manager.revoke(license.id)
        before = await services.subscription_repository.find_latest_for_license(license.id)

        with pytest.raises(LicenseRevokedError):
            await services.payment_service.record_payment(license.id, "50", "annual")

        after = await services.subscription_repository.find_latest_for_license(license.id)
        assert after.status == SubscriptionStatus.CANCELLED
        assert after.end_date == before.end_date
        payments = await services.list_payments.handle(license.id)
        assert [p.payment_type for p in payments] == ["initial"]
        current = await services.lifecycle_manager.get(license.id)
        assert current.status == LicenseStatus.REVOKED


@pytest.mark.django_db(transaction=True)
@pytest.mark.integration
@pytest.mark.asyncio
class TestSubscriptionAdministration:
    """Tests for renewing and replacing subscriptions."""

    async def test_renew_from_end_date(self, services, make_license):
        license = await make_license()
        subscription = await services.subscription_repository.find_active_for_license(license.id)

        dto = await services.renew_subscription.handle(
            RenewSubscriptionCommand(subscription_id=subscription.id)
        )

        assert dto.id == subscription.id
        assert dto.status == "active"
        assert dto.end_date == renewal_window(subscription.end_date)

    async def test_renew_from_now(self, services, make_license):
        license = await make_license()
        subscription = await services.subscription_repository.find_active_for_license(license.id)
        now = timezone.now()

        renewed = await services.subscription_manager.renew(
            subscription.id, extend_from_now=True, as_of=now
        )

        assert renewed.start_date == now
        assert renewed.end_date == renewal_window(now)

    async def test_renew_reopens_expired_license(self, services, make_license):
        license = await make_expired_license(services, make_license)
        subscription = await services.subscription_repository.find_latest_for_license(license.id)
        assert subscription.status == SubscriptionStatus.EXPIRED

        await services.subscription_manager.renew(subscription.id, extend_from_now=True)

        current = await services.lifecycle_manager.get(license.id)
        assert current.status == LicenseStatus.ACTIVE
        assert (await services.lifecycle_manager.check_status(current.license_key)).valid

    async def test_renew_revoked_rejected(self, services, make_license):
        license = await make_license()
        subscription = await services.subscription_repository.find_active_for_license(license.id)
        await services.lifecycle_manager.revoke(license.id)

        with pytest.raises(LicenseRevokedError):
            await services.subscription_manager.renew(subscription.id)

    async def test_renew_unknown(self, services):
        with pytest.raises(SubscriptionNotFoundError):
            await services.subscription_manager.renew(999999)

    async def test_create_replaces_active(self, services, make_license):
        """Test a new subscription cancels the one it replaces."""
        license = await make_license()
        previous = await services.subscription_repository.find_active_for_license(license.id)
        start = timezone.now() + timedelta(days=1)

        dto = await services.create_subscription.handle(
            CreateSubscriptionCommand(license_id=license.id, start_date=start)
        )

        subscriptions = await services.list_subscriptions.handle(license.id)
        statuses = {s.id: s.status for s in subscriptions}
        assert statuses == {previous.id: "cancelled", dto.id: "active"}
        current = await services.lifecycle_manager.get(license.id)
        assert current.end_date == dto.end_date

    async def test_replaced_subscription_cannot_be_renewed(self, services, make_license):
        license = await make_license()
        previous = await services.subscription_repository.find_active_for_license(license.id)
        await services.subscription_manager.create(license.id)

        with pytest.raises(InvalidSubscriptionStatusError):
            await services.subscription_manager.renew(previous.id)

        reloaded = await services.subscription_repository.find_by_id(previous.id)
        assert reloaded.status == SubscriptionStatus.CANCELLED
