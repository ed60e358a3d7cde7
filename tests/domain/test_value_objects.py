"""Unit tests for domain value objects."""

from decimal import Decimal

import pytest

from retail_sales.domain.exceptions import ValidationError
from retail_sales.domain.model.value_objects import Discount, Money, round_money


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation(self):
        m = Money(Decimal("10.50"))
        assert m.amount == Decimal("10.50")
        assert m.currency == "USD"

    def test_of_factory_from_string(self):
        assert Money.of("25.99").amount == Decimal("25.99")

    def test_of_factory_rejects_garbage(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("ten")

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    @pytest.mark.parametrize("raw", ["nan", "sNaN", "Infinity", "-inf"])
    def test_non_finite_amount_rejected(self, raw):
        with pytest.raises(ValidationError):
            Money.of(raw)

    def test_float_amount_rejected(self):
        with pytest.raises(ValidationError, match="must be a Decimal"):
            Money(10.5)

    def test_addition_and_subtraction(self):
        assert Money.of("10") + Money.of("5.50") == Money.of("15.50")
        assert Money.of("10") - Money.of("3") == Money.of("7")

    def test_subtraction_going_negative_rejected(self):
        with pytest.raises(ValidationError, match="Cannot subtract"):
            Money.of("5") - Money.of("10")

    def test_multiplication_by_int(self):
        assert Money.of("7.50") * 3 == Money.of("22.50")

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money(Decimal("10"), "USD") + Money(Decimal("5"), "EUR")

    def test_str_formatting(self):
        assert str(Money.of("15")) == "$15.00"
        assert str(Money.of("9.5")) == "$9.50"
        assert str(Money.of("0.125")) == "$0.13"

    def test_zero(self):
        assert Money.zero() == Money.of("0")


# ── Rounding ─────────────────────────────────────────────────────────────────


class TestRoundMoney:

    @pytest.mark.parametrize(
        "raw, expected",
        [("0.125", "0.13"), ("0.135", "0.14"), ("2.345", "2.35"), ("2.344", "2.34")],
    )
    def test_halves_round_away_from_zero(self, raw, expected):
        assert round_money(Decimal(raw)) == Decimal(expected)


# ── Discount ─────────────────────────────────────────────────────────────────


class TestDiscount:

    def test_none_is_not_applied(self):
        d = Discount.none()
        assert d.percentage == 0
        assert d.amount == 0
        assert not d.is_applied

    def test_from_percentage_derives_rounded_amount(self):
        d = Discount.from_percentage(Decimal("10"), Decimal("0.65"))
        assert d.amount == Decimal("0.07")
        assert d.is_applied

    @pytest.mark.parametrize("pct", ["-1", "100.01"])
    def test_percentage_out_of_range_rejected(self, pct):
        with pytest.raises(ValidationError, match="between 0 and 100"):
            Discount.from_percentage(Decimal(pct), Decimal("10"))

    def test_is_immutable(self):
        d = Discount.none()
        with pytest.raises(AttributeError):
            d.amount = Decimal("5")  # type: ignore[misc]

    def test_str(self):
        assert str(Discount.from_percentage(Decimal("20"), Decimal("100"))) == "20%"
