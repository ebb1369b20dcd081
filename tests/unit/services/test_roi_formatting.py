"""
Unit tests for trace formatting helpers.
"""

from datetime import date
from decimal import Decimal

import pytest

from roi_engine.models.enums import BillingPeriod
from roi_engine.services.roi.formatting import (
    currency_symbol,
    format_currency,
    format_date,
    format_fixed,
    format_hours,
    format_period_display,
    format_quantity,
    pluralize,
)


class TestFormatCurrency:
    """Tests for format_currency."""

    def test_rounds_half_up_with_separators(self):
        """Test whole-unit display."""
        assert format_currency(Decimal("1234.5")) == "£1,235"

    def test_negative_sign_before_symbol(self):
        """Test negative amounts put the sign first."""
        assert format_currency(Decimal("-80"), "USD") == "-$80"

    def test_decimals(self):
        """Test fixed decimal places."""
        assert format_currency(Decimal("25"), "GBP", decimals=2) == "£25.00"
        assert format_currency(Decimal("701.3797"), "EUR", decimals=2) == "€701.38"

    def test_unknown_currency_uses_code(self):
        """Test unknown codes are shown verbatim."""
        assert format_currency(10, "XYZ") == "XYZ10"

    def test_symbols(self):
        """Test symbol lookup is case-insensitive."""
        assert currency_symbol("cad") == "C$"
        assert currency_symbol(None) == ""


class TestFormatNumbers:
    """Tests for quantity and fixed-point formatting."""

    def test_quantity_integral(self):
        """Test whole numbers have no decimals."""
        assert format_quantity(Decimal("15")) == "15"
        assert format_quantity(Decimal("15.0")) == "15"

    def test_quantity_fractional(self):
        """Test fractions get two decimals."""
        assert format_quantity(Decimal("2.5")) == "2.50"

    def test_fixed(self):
        """Test fixed-point always shows decimals."""
        assert format_fixed(Decimal("2")) == "2.00"
        assert format_fixed(Decimal(61) / Decimal("30.44")) == "2.00"


class TestFormatHours:
    """Tests for format_hours."""

    @pytest.mark.parametrize(
        "minutes,expected",
        [(0, "0h"), (None, "0h"), (45, "45m"), (120, "2h"), (125, "2h 5m")],
    )
    def test_format_hours(self, minutes, expected):
        """Test hour and minute rendering."""
        assert format_hours(minutes) == expected


class TestLabels:
    """Tests for period, date and plural labels."""

    def test_period_display(self):
        """Test billing period labels."""
        assert format_period_display(BillingPeriod.MONTHLY) == "monthly"
        assert format_period_display(BillingPeriod.YEARLY) == "12 months"
        assert format_period_display("24months") == "24 months"
        assert format_period_display(None) == ""

    def test_format_date(self):
        """Test short date rendering."""
        assert format_date(date(2025, 12, 8)) == "8 Dec 2025"
        assert format_date(None) == ""

    def test_pluralize(self):
        """Test only exactly one is singular."""
        assert pluralize(1, "month") == "month"
        assert pluralize(0, "month") == "months"
        assert pluralize(Decimal("1.5"), "week") == "weeks"
        assert pluralize(2, "day", "days") == "days"
