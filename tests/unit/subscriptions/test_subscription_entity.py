"""
Unit tests for Subscription domain entity.
"""
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from core.domain.exceptions import InvalidSubscriptionStatusError
from core.domain.value_objects import SubscriptionStatus
from subscriptions.domain.subscription import Subscription


@pytest.fixture
def subscription():
    start = timezone.now()
    return Subscription.create(
        license_id=1,
        start_date=start,
        end_date=start + timedelta(days=30),
        annual_fee=Decimal("50"),
    )


class TestSubscriptionEntity:
    """Tests for Subscription domain entity."""

    def test_create(self, subscription):
        """Test a new subscription is active with grace ending at the end date."""
        assert subscription.status == SubscriptionStatus.ACTIVE
        assert subscription.grace_period_end == subscription.end_date
        assert subscription.is_active

    def test_end_before_start_rejected(self):
        now = timezone.now()
        with pytest.raises(ValueError, match="cannot end before"):
            Subscription.create(1, now, now - timedelta(days=1), Decimal("50"))

    def test_is_current(self, subscription):
        assert subscription.is_current(subscription.end_date)
        assert not subscription.is_current(subscription.end_date + timedelta(microseconds=1))
        assert not subscription.expire().is_current(subscription.start_date)

    def test_in_grace_period(self, subscription):
        assert subscription.in_grace_period(subscription.end_date)
        assert not subscription.in_grace_period(subscription.end_date + timedelta(seconds=1))


class TestSubscriptionTransitions:
    """Tests for renew, cancel and expire."""

    def test_renew_reactivates_in_place(self, subscription):
        new_end = subscription.end_date + timedelta(days=365)
        renewed = subscription.expire().renew(subscription.end_date, new_end)

        assert renewed.status == SubscriptionStatus.ACTIVE
        assert renewed.end_date == new_end
        assert renewed.grace_period_end == new_end
        assert renewed.annual_fee == Decimal("50")
        assert renewed.id == subscription.id

    def test_renew_with_new_fee(self, subscription):
        renewed = subscription.renew(
            subscription.end_date, subscription.end_date + timedelta(days=365), Decimal("60")
        )
        assert renewed.annual_fee == Decimal("60")

    def test_cancel_pulls_window_back(self, subscription):
        cancelled_at = subscription.start_date + timedelta(days=3)
        cancelled = subscription.cancel(cancelled_at)

        assert cancelled.status == SubscriptionStatus.CANCELLED
        assert cancelled.end_date == cancelled_at
        assert cancelled.grace_period_end == cancelled_at

    def test_cancel_before_start(self, subscription):
        cancelled_at = subscription.start_date - timedelta(days=1)
        cancelled = subscription.cancel(cancelled_at)
        assert cancelled.start_date == cancelled_at

    def test_cancelled_row_cannot_be_renewed(self, subscription):
        cancelled = subscription.cancel(subscription.start_date + timedelta(days=3))
        with pytest.raises(InvalidSubscriptionStatusError):
            cancelled.renew(cancelled.end_date, cancelled.end_date + timedelta(days=365))

    def test_expire(self, subscription):
        assert subscription.expire().status == SubscriptionStatus.EXPIRED
