"""
Unit tests for License domain entity.
"""
from dataclasses import replace
from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from core.domain.exceptions import InvalidLicenseStatusError
from core.domain.value_objects import LicenseStatus
from licenses.domain.license import License
from licenses.domain.license_key import generate_license_key


class TestLicenseEntity:
    """Tests for License domain entity."""

    def test_create_license(self, sample_license):
        """Test creating a paid license entity."""
        assert sample_license.id is None
        assert sample_license.status == LicenseStatus.ACTIVE
        assert sample_license.seat_count == 0
        assert sample_license.seat_limit == 2
        assert sample_license.product_tag == "grocery"
        assert sample_license.is_free_trial is False
        assert sample_license.free_trial_end_date is None

    def test_create_trial(self):
        """Test a trial records its end date as the trial end."""
        start = timezone.now()
        end = start + timedelta(days=9)
        license = License.create(
            license_key=generate_license_key(),
            customer_name=None,
            customer_phone=None,
            location_name=None,
            location_address=None,
            initial_price=Decimal("350"),
            price_per_seat=Decimal("25"),
            start_date=start,
            end_date=end,
            is_free_trial=True,
        )
        assert license.is_free_trial is True
        assert license.free_trial_end_date == end
        assert license.has_location is False

    def test_validation(self, sample_license):
        with pytest.raises(ValueError, match="Seat count"):
            replace(sample_license, seat_count=-1)
        with pytest.raises(ValueError, match="License key"):
            replace(sample_license, license_key="")

    def test_is_blocked(self, sample_license):
        assert not sample_license.is_blocked
        assert replace(sample_license, status=LicenseStatus.REVOKED).is_blocked
        assert sample_license.suspend().is_blocked
        assert not replace(sample_license, status=LicenseStatus.EXPIRED).is_blocked

    def test_can_add_seat(self, sample_license):
        assert sample_license.can_add_seat
        assert not replace(sample_license, seat_count=2).can_add_seat

    def test_matches_address(self, sample_license):
        assert sample_license.matches_address("  1 MARKET street ")
        assert not sample_license.matches_address("2 Market Street")


class TestLicenseTransitions:
    """Tests for License status transitions."""

    def test_suspend_and_resume(self, sample_license):
        suspended = sample_license.suspend()
        assert suspended.status == LicenseStatus.SUSPENDED
        assert suspended.resume().status == LicenseStatus.ACTIVE

    def test_cannot_suspend_revoked(self, sample_license):
        revoked = replace(sample_license, status=LicenseStatus.REVOKED)
        with pytest.raises(InvalidLicenseStatusError):
            revoked.suspend()

    def test_resume_requires_suspended(self, sample_license):
        with pytest.raises(InvalidLicenseStatusError):
            sample_license.resume()

    def test_convert_from_trial(self, sample_license):
        trial = replace(
            sample_license, is_free_trial=True, free_trial_end_date=sample_license.end_date
        )
        converted = trial.convert_from_trial()
        assert converted.is_free_trial is False
        assert converted.free_trial_end_date is None
        assert sample_license.convert_from_trial() is sample_license

    def test_with_changes_keeps_identity(self, sample_license):
        saved = replace(sample_license, id=5)
        changed = saved.with_changes(customer_name="New Name", license_key="X", id=9)
        assert changed.customer_name == "New Name"
        assert changed.license_key == saved.license_key
        assert changed.id == 5
