"""
Integration tests for the license lifecycle.
"""
from dataclasses import replace
from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

import pytest
from django.db import DatabaseError
from django.utils import timezone

from activations.application.commands.activate_license import ActivateLicenseCommand
from core.domain.events import EventHandler
from core.domain.exceptions import (
    DuplicateLicenseError,
    InvalidLicenseStatusError,
    LicenseNotFoundError,
    MissingFieldError,
    SeatLimitExceededError,
)
from core.domain.time_windows import paid_window, trial_window
from core.domain.value_objects import LicenseStatus, SubscriptionStatus
from licenses.application.commands.generate_license import GenerateLicenseCommand
from licenses.application.commands.revoke_license import RevokeLicenseCommand
from licenses.application.queries.get_license_status import GetLicenseStatusQuery
from licenses.domain.events import LicenseCreated
from licenses.domain.license_key import is_valid_license_key
from tests.fakes import RecordingChannel


@pytest.mark.django_db(transaction=True)
@pytest.mark.integration
@pytest.mark.asyncio
class TestLicenseCreation:
    """Tests for creating licenses."""

    async def test_paid_license(self, services, make_license):
        """Test a paid license gets a one-year window and its initial payment."""
        license = await make_license()

        assert is_valid_license_key(license.license_key)
        assert license.status == LicenseStatus.ACTIVE
        assert license.is_free_trial is False
        assert license.customer_phone == "+15550100000"
        assert license.end_date == paid_window(license.start_date)
        assert await services.payment_service.has_initial_payment(license.id)

    async def test_trial_license(self, services, make_license):
        """Test a trial runs ten days including the start day and has no payment."""
        license = await make_license(is_free_trial=True)

        assert license.is_free_trial is True
        assert license.end_date == trial_window(license.start_date, 10)
        assert license.free_trial_end_date == license.end_date
        assert not await services.payment_service.has_initial_payment(license.id)

    async def test_defaults_from_settings(self, make_license):
        license = await make_license()
        assert license.seat_limit == 2
        assert license.initial_price == Decimal("350")
        assert license.price_per_seat == Decimal("25")
        assert license.product_tag == "grocery"

    async def test_duplicate_location_rejected(self, make_license):
        """Test one phone cannot hold two licenses for the same location."""
        await make_license(location_name="Main Branch")

        with pytest.raises(DuplicateLicenseError):
            await make_license(customer_phone="+1-555-010-0000", location_name=" main branch ")

    async def test_same_phone_other_location(self, make_license):
        first = await make_license(location_name="Main Branch")
        second = await make_license(location_name="Second Branch")
        assert first.id != second.id

    async def test_invalid_phone(self, make_license):
        with pytest.raises(MissingFieldError):
            await make_license(customer_phone="no phone")

    async def test_publishes_event(self, services, event_bus, make_license):
        received = []

        class Collector(EventHandler):
            async def handle(self, event):
                received.append(event)

        event_bus.subscribe(LicenseCreated, Collector())
        license = await make_license()

        assert [event.license_id for event in received] == [license.id]

    async def test_sends_details_to_verified_phone(
        self, services, channel: RecordingChannel, verify_phone
    ):
        await verify_phone("+15550100000")

        dto = await services.generate_license.handle(
            GenerateLicenseCommand(
                customer_name="Corner Grocery",
                customer_phone="+15550100000",
                location_name="Main Branch",
                location_address="1 Market Street",
            )
        )

        assert dto.seats_remaining == 2
        assert len(channel.sent) == 1
        assert dto.license_key in channel.sent[0][1]


@pytest.mark.django_db(transaction=True)
@pytest.mark.integration
@pytest.mark.asyncio
class TestCheckStatus:
    """Tests for status checks."""

    async def _set_end(self, services, license, end):
        subscription = await services.subscription_repository.find_active_for_license(license.id)
        await services.subscription_repository.save(
            replace(subscription, end_date=end, grace_period_end=end)
        )
        await services.license_repository.invalidate(license)

    async def test_one_day_left(self, services, make_license):
        license = await make_license()
        now = timezone.now()
        await self._set_end(services, license, now + timedelta(days=1))

        check = await services.lifecycle_manager.check_status(license.license_key, as_of=now)

        assert check.valid is True
        assert check.status == "active"
        assert check.days_remaining == 1

    async def test_ended_yesterday(self, services, make_license):
        now = timezone.now()
        license = await make_license(
            start_date=now - timedelta(days=30), end_date=now - timedelta(days=1)
        )

        check = await services.lifecycle_manager.check_status(license.license_key)

        assert check.valid is False
        assert check.status == "expired"
        assert check.expires_at is not None

    async def test_grace_period(self, services, make_license):
        """Test an explicit grace window keeps the license valid past its end date."""
        license = await make_license()
        now = timezone.now()
        subscription = await services.subscription_repository.find_active_for_license(license.id)
        await services.subscription_repository.save(
            replace(
                subscription,
                start_date=now - timedelta(days=30),
                end_date=now - timedelta(days=1),
                grace_period_end=now + timedelta(days=2),
            )
        )

        check = await services.lifecycle_manager.check_status(license.license_key, as_of=now)

        assert check.valid is True
        assert check.status == "grace_period"
        assert check.days_remaining == 0

    async def test_unknown_key(self, services):
        dto = await services.get_license_status.handle(
            GetLicenseStatusQuery(license_key="AAAA-BBBB-CCCC-DDDD-0000")
        )
        assert dto.valid is False
        assert dto.status == "not_found"
        assert dto.license is None

    async def test_handler_accepts_messy_key(self, services, make_license):
        license = await make_license()

        dto = await services.get_license_status.handle(
            GetLicenseStatusQuery(license_key=f"  {license.license_key.lower()} ")
        )

        assert dto.valid is True
        assert dto.license.id == license.id


@pytest.mark.django_db(transaction=True)
@pytest.mark.integration
@pytest.mark.asyncio
class TestRevocation:
    """Tests for revoking licenses."""

    async def test_revoke_cascades(self, services, make_license):
        """Test revocation cancels the subscription and frees the device."""
        license = await make_license()
        await services.activate_license.handle(
            ActivateLicenseCommand(license_key=license.license_key, hardware_id="HW-1")
        )

        dto = await services.revoke_license.handle(RevokeLicenseCommand(license_id=license.id))

        assert dto.status == "revoked"
        subscriptions = await services.subscription_manager.find_for_license(license.id)
        assert [s.status for s in subscriptions] == [SubscriptionStatus.CANCELLED]
        assert subscriptions[0].end_date == subscriptions[0].grace_period_end
        assert subscriptions[0].end_date <= timezone.now()
        activations = await services.activation_manager.list_for_license(license.id)
        assert [a.is_active for a in activations] == [False]

        check = await services.lifecycle_manager.check_status(license.license_key)
        assert check.status == "revoked"

    async def test_revoke_by_key(self, services, make_license):
        license = await make_license()
        dto = await services.revoke_license.handle(
            RevokeLicenseCommand(license_key=license.license_key.lower())
        )
        assert dto.id == license.id

    async def test_revoke_needs_identifier(self, services):
        with pytest.raises(MissingFieldError):
            await services.revoke_license.handle(RevokeLicenseCommand())

    async def test_revoke_unknown(self, services):
        with pytest.raises(LicenseNotFoundError):
            await services.lifecycle_manager.revoke(999999)


@pytest.mark.django_db(transaction=True)
@pytest.mark.integration
@pytest.mark.asyncio
class TestSuspendResumeUpdate:
    """Tests for suspension and administrator edits."""

    async def test_suspend_and_resume(self, services, make_license):
        license = await make_license()

        suspended = await services.lifecycle_manager.suspend(license.id)
        check = await services.lifecycle_manager.check_status(license.license_key)
        assert suspended.status == LicenseStatus.SUSPENDED
        assert check.status == "suspended"

        resumed = await services.lifecycle_manager.resume(license.id)
        assert resumed.status == LicenseStatus.ACTIVE
        assert (await services.lifecycle_manager.check_status(license.license_key)).valid

    async def test_update_fields(self, services, make_license):
        license = await make_license()

        updated = await services.lifecycle_manager.update(
            license.id,
            {"customer_name": "New Owner", "seat_limit": 5, "price_per_seat": "30"},
        )

        assert updated.customer_name == "New Owner"
        assert updated.seat_limit == 5
        assert updated.price_per_seat == Decimal("30")
        found = await services.lifecycle_manager.find_by_key(license.license_key)
        assert found.customer_name == "New Owner"

    async def test_update_unknown_field(self, services, make_license):
        license = await make_license()
        with pytest.raises(MissingFieldError):
            await services.lifecycle_manager.update(license.id, {"license_key": "X"})

    async def test_update_seat_limit_below_count(self, services, make_license):
        license = await make_license()
        await services.license_repository.set_seat_count(license.id, 2)
        await services.license_repository.invalidate(license)

        with pytest.raises(SeatLimitExceededError):
            await services.lifecycle_manager.update(license.id, {"seat_limit": 1})

    async def test_update_to_revoked_revokes(self, services, make_license):
        license = await make_license()

        updated = await services.lifecycle_manager.update(license.id, {"status": "revoked"})

        assert updated.status == LicenseStatus.REVOKED
        subscription = await services.subscription_repository.find_latest_for_license(license.id)
        assert subscription.status == SubscriptionStatus.CANCELLED

    async def test_update_with_revoke_applies_edits(self, services, make_license):
        license = await make_license()

        updated = await services.lifecycle_manager.update(
            license.id, {"status": "revoked", "location_name": "Closed Branch"}
        )

        assert updated.status == LicenseStatus.REVOKED
        assert updated.location_name == "Closed Branch"

    async def test_update_with_revoke_is_all_or_nothing(
        self, services, make_license, license_repository
    ):
        """Test a failed revocation leaves the accompanying edits unapplied."""
        license = await make_license()

        with patch(
            "licenses.infrastructure.repositories.django_license_repository"
            ".ActivationModel.objects.filter",
            side_effect=DatabaseError("connection lost"),
        ):
            with pytest.raises(DatabaseError):
                await services.lifecycle_manager.update(
                    license.id, {"status": "revoked", "location_name": "Closed Branch"}
                )

        stored = await license_repository.find_by_id(license.id)
        assert stored.status == LicenseStatus.ACTIVE
        assert stored.location_name == license.location_name

    async def test_revoked_cannot_change_status(self, services, make_license):
        license = await make_license()
        await services.lifecycle_manager.revoke(license.id)

        with pytest.raises(InvalidLicenseStatusError):
            await services.lifecycle_manager.update(license.id, {"status": "active"})

    async def test_update_duplicate_location(self, services, make_license):
        await make_license(location_name="Main Branch")
        other = await make_license(location_name="Second Branch")

        with pytest.raises(DuplicateLicenseError):
            await services.lifecycle_manager.update(other.id, {"location_name": "MAIN BRANCH"})
