"""
Unit tests for subscription window arithmetic.
"""
from datetime import datetime, timedelta

from django.utils import timezone

from core.domain.time_windows import (
    days_remaining,
    end_of_day,
    paid_window,
    renewal_window,
    trial_window,
)


def local(*args) -> datetime:
    return timezone.make_aware(datetime(*args))


class TestEndOfDay:
    """Tests for end_of_day."""

    def test_last_instant_of_day(self):
        result = end_of_day(local(2025, 3, 10, 8, 30))
        assert (result.year, result.month, result.day) == (2025, 3, 10)
        assert (result.hour, result.minute, result.second, result.microsecond) == (
            23,
            59,
            59,
            999999,
        )

    def test_idempotent(self):
        moment = end_of_day(local(2025, 3, 10, 8, 30))
        assert end_of_day(moment) == moment


class TestYearShift:
    """Tests for calendar-year arithmetic in the paid and renewal windows."""

    def test_renewal_keeps_day_of_month(self):
        assert renewal_window(local(2025, 6, 15, 12)).date() == local(2026, 6, 15).date()

    def test_leap_day_renewal_maps_to_feb_28(self):
        assert renewal_window(local(2024, 2, 29, 9)).date() == local(2025, 2, 28).date()

    def test_leap_day_paid_window_ends_feb_27(self):
        assert paid_window(local(2024, 2, 29, 9)).date() == local(2025, 2, 27).date()

    def test_into_leap_year_keeps_feb_28(self):
        assert renewal_window(local(2027, 2, 28, 9)).date() == local(2028, 2, 28).date()


class TestWindows:
    """Tests for the three window shapes."""

    def test_trial_window_counts_start_day(self):
        end = trial_window(local(2025, 1, 1, 10), 10)
        assert end.date() == local(2025, 1, 10).date()
        assert end.hour == 23

    def test_trial_window_minimum_one_day(self):
        assert trial_window(local(2025, 1, 1, 10), 0).date() == local(2025, 1, 1).date()

    def test_paid_window_is_one_year_minus_a_day(self):
        end = paid_window(local(2025, 1, 1, 10))
        assert end.date() == local(2025, 12, 31).date()

    def test_renewal_window_is_one_full_year(self):
        end = renewal_window(local(2025, 12, 31, 23, 59))
        assert end.date() == local(2026, 12, 31).date()


class TestDaysRemaining:
    """Tests for days_remaining."""

    def test_rounds_up(self):
        now = local(2025, 1, 1, 12)
        assert days_remaining(now + timedelta(days=2, hours=1), now) == 3

    def test_whole_days(self):
        now = local(2025, 1, 1, 12)
        assert days_remaining(now + timedelta(days=1), now) == 1

    def test_past_end_is_not_positive(self):
        now = local(2025, 1, 1, 12)
        assert days_remaining(now - timedelta(hours=1), now) <= 0
