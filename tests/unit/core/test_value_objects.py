"""
Unit tests for core value objects.
"""
import pytest

from core.domain.value_objects import (
    HardwareId,
    LicenseStatus,
    PaymentType,
    PhoneNumber,
    SubscriptionStatus,
    normalize_contact,
    normalize_location,
)


class TestPhoneNumber:
    """Tests for PhoneNumber value object."""

    def test_parse_strips_formatting(self):
        """Test that spaces, dashes and brackets are removed."""
        phone = PhoneNumber.parse(" +1 (555) 010-0000 ")
        assert phone.value == "+15550100000"
        assert str(phone) == "+15550100000"

    def test_parse_without_plus(self):
        """Test a local number keeps no prefix."""
        assert PhoneNumber.parse("0300 1234567").value == "03001234567"

    def test_digits(self):
        """Test digits drops the leading plus."""
        assert PhoneNumber.parse("+92 300 1234567").digits == "923001234567"

    def test_invalid_phone(self):
        """Test a value without digits is rejected."""
        with pytest.raises(ValueError, match="Invalid phone number"):
            PhoneNumber.parse("call me")

    def test_equality(self):
        """Test phones compare by value."""
        assert PhoneNumber.parse("+1 555 0100") == PhoneNumber.parse("+1-555-0100")


class TestNormalization:
    """Tests for the comparison helpers."""

    def test_normalize_contact(self):
        assert normalize_contact("+1 (555) 010-0000") == "15550100000"
        assert normalize_contact(None) == ""

    def test_normalize_location(self):
        assert normalize_location("  Main BRANCH ") == "main branch"
        assert normalize_location(None) == ""


class TestHardwareId:
    """Tests for HardwareId value object."""

    def test_valid(self):
        assert str(HardwareId("HW-001")) == "HW-001"

    def test_empty(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            HardwareId("   ")

    def test_too_long(self):
        with pytest.raises(ValueError, match="too long"):
            HardwareId("x" * 256)


class TestEnums:
    """Tests for status enums."""

    def test_license_status_values(self):
        assert LicenseStatus("active") == LicenseStatus.ACTIVE
        assert str(LicenseStatus.SUSPENDED) == "suspended"

    def test_unknown_license_status(self):
        with pytest.raises(ValueError):
            LicenseStatus("cancelled")

    def test_subscription_status_values(self):
        assert str(SubscriptionStatus.GRACE_PERIOD) == "grace_period"

    def test_payment_type_values(self):
        assert PaymentType("user") == PaymentType.USER
        assert str(PaymentType.ANNUAL) == "annual"
