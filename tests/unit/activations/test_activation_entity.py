"""
Unit tests for Activation domain entity.
"""
from dataclasses import replace
from datetime import timedelta

import pytest

from activations.domain.activation import Activation
from activations.domain.services import SeatUsage


class TestActivationEntity:
    """Tests for Activation domain entity."""

    def test_create(self):
        activation = Activation.create(license_id=1, hardware_id="HW-1", machine_name="Till 1")
        assert activation.is_active
        assert activation.activated_at == activation.last_validation

    def test_requires_hardware_id(self):
        with pytest.raises(ValueError):
            Activation.create(license_id=1, hardware_id="")

    def test_refresh_preserves_activated_at(self):
        """Test a repeat activation keeps the original activation time."""
        original = Activation.create(license_id=1, hardware_id="HW-1", machine_name="Till 1")
        earlier = replace(original, activated_at=original.activated_at - timedelta(days=30))

        refreshed = earlier.refresh()

        assert refreshed.activated_at == earlier.activated_at
        assert refreshed.last_validation >= original.last_validation
        assert refreshed.machine_name == "Till 1"

    def test_reactivate_resets_activated_at(self):
        original = Activation.create(license_id=1, hardware_id="HW-1")
        inactive = replace(
            original.deactivate(), activated_at=original.activated_at - timedelta(days=30)
        )

        reactivated = inactive.reactivate("Till 2")

        assert reactivated.is_active
        assert reactivated.activated_at > inactive.activated_at
        assert reactivated.machine_name == "Till 2"

    def test_deactivate(self):
        activation = Activation.create(license_id=1, hardware_id="HW-1")
        deactivated = activation.deactivate()
        assert deactivated.is_active is False
        assert deactivated.deactivate() is deactivated


class TestSeatUsage:
    """Tests for SeatUsage."""

    def test_remaining_and_allowed(self):
        assert SeatUsage(1, 3).remaining == 2
        assert SeatUsage(1, 3).allowed
        assert SeatUsage(3, 3).remaining == 0
        assert not SeatUsage(3, 3).allowed
        assert SeatUsage(5, 3).remaining == 0
