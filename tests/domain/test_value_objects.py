"""Unit tests for domain value objects."""

from decimal import Decimal

import pytest

from commerce.domain.exceptions import InvalidMoneyValueError, InvalidQuantityError, ValidationError
from commerce.domain.model.value_objects import Money, Quantity


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation(self):
        m = Money(Decimal("10.50"))
        assert m.amount == Decimal("10.50")
        assert m.currency == "USD"

    def test_of_factory_from_string(self):
        m = Money.of("25.99")
        assert m.amount == Decimal("25.99")

    def test_of_factory_from_int(self):
        m = Money.of(10)
        assert m.amount == Decimal("10.00")

    def test_amount_rounded_half_up_to_cents(self):
        assert Money.of("2.345").amount == Decimal("2.35")
        assert Money.of("2.344").amount == Decimal("2.34")

    def test_float_refused(self):
        with pytest.raises(InvalidMoneyValueError, match="float"):
            Money.of(0.1)

    def test_garbage_refused(self):
        with pytest.raises(InvalidMoneyValueError, match="Invalid money amount"):
            Money.of("ten dollars")

    def test_non_finite_refused(self):
        with pytest.raises(InvalidMoneyValueError, match="finite"):
            Money(Decimal("NaN"))

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_negative_zero_is_zero(self):
        assert str(Money(Decimal("-0"))) == "$0.00"

    def test_unsupported_currency_rejected(self):
        with pytest.raises(InvalidMoneyValueError, match="Unsupported currency"):
            Money.of("1", "XYZ")

    def test_currency_code_is_normalised(self):
        assert Money.of("1", "eur").currency == "EUR"

    def test_addition(self):
        result = Money.of("10") + Money.of("5.50")
        assert result == Money.of("15.50")

    def test_repeated_addition_does_not_drift(self):
        total = Money.zero()
        for _ in range(10):
            total = total + Money.of("0.10")
        assert total == Money.of("1.00")

    def test_subtraction(self):
        result = Money.of("10") - Money.of("3")
        assert result == Money.of("7")

    def test_subtraction_going_negative_rejected(self):
        with pytest.raises(ValidationError, match="negative amount"):
            Money.of("5") - Money.of("10")

    def test_multiplication_by_int(self):
        result = Money.of("7.50") * 3
        assert result == Money.of("22.50")

    def test_multiplication_by_float_rejected(self):
        with pytest.raises(TypeError):
            Money.of("7.50") * 1.5

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money(Decimal("10"), "USD") + Money(Decimal("5"), "EUR")

    def test_str_formatting(self):
        assert str(Money.of("15")) == "$15.00"
        assert str(Money.of("9.5")) == "$9.50"
        assert str(Money.of("3", "GBP")) == "£3.00"

    def test_comparison_operators(self):
        assert Money.of("5") < Money.of("10")
        assert Money.of("10") > Money.of("5")
        assert Money.of("10") >= Money.of("10")
        assert Money.of("10") <= Money.of("10")

    def test_is_zero(self):
        assert Money.zero().is_zero
        assert not Money.of("0.01").is_zero


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_valid_quantity(self):
        q = Quantity(5)
        assert q.value == 5

    def test_zero_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(0)

    def test_negative_rejected(self):
        with pytest.raises(InvalidQuantityError, match="must be positive"):
            Quantity(-3)

    def test_non_integer_rejected(self):
        with pytest.raises(InvalidQuantityError, match="integer"):
            Quantity(True)

    def test_str(self):
        assert str(Quantity(7)) == "7"
