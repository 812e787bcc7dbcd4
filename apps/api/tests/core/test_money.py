"""
Unit tests for money conversion and formatting.

These tests cover:
- Cents <-> decimal conversion (exact, truncating)
- None handling (unset vs zero)
- Display formatting for both symbol positions
- Currency format validation
"""

from decimal import Decimal

import pytest

from app.core.money import (
    CurrencyFormat,
    InvalidConfiguration,
    MoneyFormatter,
    format_cents,
    from_decimal,
    to_decimal,
)

PHP = CurrencyFormat()


class TestToDecimal:
    """Tests for to_decimal."""

    def test_converts_cents_exactly(self):
        assert to_decimal(123450, 2) == Decimal("1234.50")
        assert to_decimal(1, 2) == Decimal("0.01")

    def test_none_is_zero_at_scale(self):
        result = to_decimal(None, 2)
        assert result == 0
        assert str(result) == "0.00"

    def test_zero_decimal_places(self):
        assert to_decimal(1500, 0) == Decimal("1500")

    def test_three_decimal_places(self):
        assert to_decimal(1234567, 3) == Decimal("1234.567")

    def test_large_amount_keeps_every_digit(self):
        cents = 123456789012345678901234567890
        assert to_decimal(cents, 2) == Decimal("1234567890123456789012345678.90")

    def test_negative_decimal_places_rejected(self):
        with pytest.raises(InvalidConfiguration):
            to_decimal(100, -1)


class TestFromDecimal:
    """Tests for from_decimal."""

    def test_converts_decimal_to_cents(self):
        assert from_decimal(Decimal("1234.50"), 2) == 123450

    def test_none_stays_none(self):
        assert from_decimal(None, 2) is None

    def test_zero_is_zero_not_none(self):
        assert from_decimal(Decimal("0"), 2) == 0

    def test_truncates_instead_of_rounding(self):
        """Sub-cent fractions are dropped, never rounded up."""
        assert from_decimal(Decimal("12500.009"), 2) == 1250000
        assert from_decimal(Decimal("0.019"), 2) == 1
        assert from_decimal(Decimal("0.005"), 2) == 0

    def test_truncates_toward_zero_for_negative_amounts(self):
        assert from_decimal(Decimal("-1.239"), 2) == -123

    def test_accepts_integer_like_input(self):
        assert from_decimal(Decimal(15), 2) == 1500

    def test_non_finite_amount_rejected(self):
        with pytest.raises(ValueError):
            from_decimal(Decimal("NaN"), 2)

    def test_negative_decimal_places_rejected(self):
        with pytest.raises(InvalidConfiguration):
            from_decimal(Decimal("1.00"), -2)

    @pytest.mark.parametrize("cents", [0, 1, 99, 100, 123450, 10**18 + 7])
    @pytest.mark.parametrize("places", [0, 2, 3])
    def test_round_trip_restores_cents(self, cents, places):
        assert from_decimal(to_decimal(cents, places), places) == cents


class TestFormatCents:
    """Tests for format_cents."""

    def test_default_philippine_peso(self):
        assert format_cents(123450, PHP) == "₱1,234.50"

    def test_zero(self):
        assert format_cents(0, PHP) == "₱0.00"

    def test_small_amount_pads_fraction(self):
        assert format_cents(5, PHP) == "₱0.05"

    def test_groups_millions(self):
        assert format_cents(123456789, PHP) == "₱1,234,567.89"

    def test_symbol_after_number(self):
        fmt = CurrencyFormat(symbol="PHP", symbol_position="after")
        assert format_cents(123450, fmt) == "1,234.50 PHP"

    def test_negative_amount_sign_next_to_digits(self):
        assert format_cents(-123450, PHP) == "₱-1,234.50"
        fmt = CurrencyFormat(symbol="PHP", symbol_position="after")
        assert format_cents(-123450, fmt) == "-1,234.50 PHP"

    def test_zero_decimal_places_omits_separator(self):
        fmt = CurrencyFormat(symbol="¥", decimal_places=0, code="JPY")
        assert format_cents(1234567, fmt) == "¥1,234,567"

    def test_custom_separators(self):
        fmt = CurrencyFormat(
            symbol="€",
            decimal_separator=",",
            thousands_separator=".",
            symbol_position="after",
            code="EUR",
        )
        assert format_cents(123450, fmt) == "1.234,50 €"


class TestCurrencyFormat:
    """Tests for CurrencyFormat validation."""

    def test_negative_decimal_places_rejected(self):
        with pytest.raises(InvalidConfiguration):
            CurrencyFormat(decimal_places=-1)

    def test_unknown_symbol_position_rejected(self):
        with pytest.raises(InvalidConfiguration) as exc_info:
            CurrencyFormat(symbol_position="middle")
        assert "symbol_position" in str(exc_info.value)

    def test_is_immutable(self):
        with pytest.raises(AttributeError):
            PHP.symbol = "$"  # type: ignore[misc]


class TestMoneyFormatter:
    """Tests for the bound formatter used by services."""

    def test_uses_format_decimal_places(self):
        money = MoneyFormatter(CurrencyFormat(decimal_places=3, symbol="BD", code="BHD"))
        assert money.to_decimal(1500) == Decimal("1.500")
        assert money.from_decimal(Decimal("1.5009")) == 1500

    def test_format_treats_none_as_zero(self):
        money = MoneyFormatter(PHP)
        assert money.format(None) == "₱0.00"
        assert money.format(123450) == "₱1,234.50"
