"""
Tests for number and currency formatting utilities.

Tests cover:
- Half-up rounding for display
- Number formatting with thousand and lakh separators
- Currency formatting
"""

from decimal import Decimal

import pytest

from apps.core.formatting_utils import format_currency, format_number, round_amount


class TestRoundAmount:
    @pytest.mark.parametrize(
        "amount, expected",
        [
            (Decimal("1618.2"), Decimal("1618.20")),
            (Decimal("0.005"), Decimal("0.01")),
            (Decimal("2.675"), Decimal("2.68")),
            (Decimal("-1.005"), Decimal("-1.01")),
            (10, Decimal("10.00")),
        ],
    )
    def test_rounds_half_up(self, amount, expected):
        assert round_amount(amount) == expected

    def test_custom_places(self):
        assert round_amount(Decimal("1.23456"), 4) == Decimal("1.2346")


class TestFormatNumber:
    def test_grouping(self):
        assert format_number(1234567) == "1,234,567"

    def test_decimal_places(self):
        assert format_number(Decimal("1234567.891"), decimal_places=2) == "1,234,567.89"

    def test_no_grouping(self):
        assert format_number(Decimal("1234.5"), decimal_places=2, use_grouping=False) == "1234.50"

    def test_small_number(self):
        assert format_number(Decimal("12.3"), decimal_places=2) == "12.30"

    @pytest.mark.parametrize(
        "number, expected",
        [(100000, "1,00,000"), (1234567, "12,34,567"), (12345678, "1,23,45,678"), (999, "999")],
    )
    def test_lakh_grouping(self, number, expected):
        assert format_number(number, lakh_grouping=True) == expected

    def test_negative(self):
        assert format_number(Decimal("-1234.5"), decimal_places=2) == "-1,234.50"


class TestFormatCurrency:
    def test_rupees(self):
        assert format_currency(Decimal("1618.2")) == "₹1,618.20"

    def test_rupees_from_full_precision_amount(self):
        assert format_currency(Decimal("809.1000")) == "₹809.10"

    def test_rupees_use_lakh_grouping(self):
        assert format_currency(Decimal("100000")) == "₹1,00,000.00"
        assert format_currency(Decimal("12345678.9")) == "₹1,23,45,678.90"

    def test_dollars_use_thousand_grouping(self):
        assert format_currency(Decimal("100000"), "USD") == "$100,000.00"

    def test_other_symbol(self):
        assert format_currency(Decimal("99.5"), "USD") == "$99.50"

    def test_unknown_currency_uses_code(self):
        assert format_currency(10, "CHF") == "10.00 CHF"

    def test_negative_amount(self):
        assert format_currency(Decimal("-5"), "INR") == "-₹5.00"
