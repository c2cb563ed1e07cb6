"""
Unit tests for Payment domain entity.
"""
from decimal import Decimal

import pytest

from core.domain.exceptions import InvalidPaymentError
from core.domain.value_objects import PaymentType
from payments.domain.payment import Payment
from payments.domain.services import parse_amount


class TestPaymentEntity:
    """Tests for Payment domain entity."""

    def test_create_annual(self):
        payment = Payment.create(1, Decimal("50"), PaymentType.ANNUAL)
        assert payment.is_annual_subscription
        assert not payment.is_initial
        assert payment.payment_date is not None

    def test_create_initial(self):
        assert Payment.create(1, Decimal("350"), PaymentType.INITIAL).is_initial

    def test_amount_must_be_positive(self):
        with pytest.raises(InvalidPaymentError):
            Payment.create(1, Decimal("0"), PaymentType.ANNUAL)

    def test_additional_users_at_least_one(self):
        with pytest.raises(InvalidPaymentError, match="Additional users"):
            Payment.create(1, Decimal("25"), PaymentType.USER, additional_users=0)


class TestParseAmount:
    """Tests for parse_amount."""

    def test_accepts_strings_and_numbers(self):
        assert parse_amount("25.50") == Decimal("25.50")
        assert parse_amount(50) == Decimal("50")

    @pytest.mark.parametrize("amount", ["abc", "-1", 0, "NaN", "Infinity"])
    def test_rejects_invalid(self, amount):
        with pytest.raises(InvalidPaymentError):
            parse_amount(amount)
