"""Tests for value formatting."""

from datetime import date
from decimal import Decimal

import pytest

from formsmith.placeholders import BindingType, TypedValue, ValueFormatter
from formsmith.placeholders.formatting import group_digits


class TestGroupDigits:
    """Test digit grouping."""

    def test_short_numbers_are_not_grouped(self):
        assert group_digits("0") == "0"
        assert group_digits("999") == "999"

    def test_indian_grouping(self):
        """Test grouping the last three digits, then pairs."""
        assert group_digits("1000") == "1,000"
        assert group_digits("100000") == "1,00,000"
        assert group_digits("1234567") == "12,34,567"
        assert group_digits("123456789") == "12,34,56,789"

    def test_western_grouping(self):
        """Test grouping in threes."""
        assert group_digits("1234567", "western") == "1,234,567"
        assert group_digits("100000", "western") == "100,000"


class TestValueFormatter:
    """Test formatting typed values."""

    def test_unknown_grouping(self):
        """Test that an unknown grouping style is rejected."""
        with pytest.raises(ValueError, match="Unknown currency grouping"):
            ValueFormatter(grouping="roman")

    def test_render_plain_string(self):
        """Test that plain strings are inserted as they are."""
        assert ValueFormatter().render("2024-06-11") == "2024-06-11"

    def test_render_typed_value(self):
        """Test that typed values are formatted by their type."""
        formatter = ValueFormatter()

        assert formatter.render(TypedValue(value="2024-06-11", type=BindingType.DATE)) == "11/06/2024"
        assert formatter.render(TypedValue(value=None, type=BindingType.TEXT)) == ""
        assert formatter.render(TypedValue(value=42, type=BindingType.TEXT)) == "42"

    def test_format_date(self):
        """Test rendering ISO dates as DD/MM/YYYY."""
        formatter = ValueFormatter()

        assert formatter.format_date("2024-06-11") == "11/06/2024"
        assert formatter.format_date("2024-06-11T10:30:00") == "11/06/2024"
        assert formatter.format_date(date(2023, 1, 5)) == "05/01/2023"

    def test_format_blank_date(self):
        """Test that blank dates render as empty text."""
        formatter = ValueFormatter()

        assert formatter.format_date(None) == ""
        assert formatter.format_date("") == ""

    def test_format_unparseable_date(self, caplog):
        """Test that unparseable dates pass through with a warning."""
        formatter = ValueFormatter()

        assert formatter.format_date("next Tuesday") == "next Tuesday"
        assert "Could not parse date" in caplog.text

    def test_format_currency_indian(self):
        """Test currency with Indian grouping."""
        formatter = ValueFormatter()

        assert formatter.format_currency("1234567.5") == "12,34,567.50"
        assert formatter.format_currency(100000) == "1,00,000.00"
        assert formatter.format_currency(Decimal("25000.50")) == "25,000.50"

    def test_format_currency_western(self):
        """Test currency with western grouping."""
        formatter = ValueFormatter(grouping="western")

        assert formatter.format_currency("1234567.5") == "1,234,567.50"

    def test_thousands_group_the_same_in_both_styles(self):
        """Test amounts below a lakh under either grouping."""
        assert ValueFormatter().format_currency(1234.5) == "1,234.50"
        assert ValueFormatter(grouping="western").format_currency(1234.5) == "1,234.50"

    def test_format_currency_rounds_half_up(self):
        """Test that amounts round half up to two decimals."""
        formatter = ValueFormatter()

        assert formatter.format_currency("0.125") == "0.13"
        assert formatter.format_currency("2.675") == "2.68"
        assert formatter.format_currency("0.124") == "0.12"

    def test_format_currency_accepts_grouped_input(self):
        """Test that already grouped input is parsed."""
        assert ValueFormatter().format_currency("1,50,000") == "1,50,000.00"

    def test_format_currency_beyond_default_precision(self):
        """Test amounts with more digits than the default decimal context holds."""
        formatter = ValueFormatter(grouping="western")

        assert formatter.format_currency("123456789012345678901234567") == (
            "123,456,789,012,345,678,901,234,567.00"
        )
        assert formatter.format_currency("123456789012345678901234567.895") == (
            "123,456,789,012,345,678,901,234,567.90"
        )
        assert formatter.format_currency("1e30") == "1" + ",000" * 10 + ".00"

    def test_format_currency_exponent_out_of_range(self, caplog):
        """Test that an amount too large to write out passes through with a warning."""
        assert ValueFormatter().format_currency("1e1000000") == "1e1000000"
        assert "Could not format currency" in caplog.text

    def test_format_negative_currency(self):
        """Test that the sign goes before the grouped digits."""
        assert ValueFormatter().format_currency("-1234567") == "-12,34,567.00"

    def test_format_blank_currency(self):
        """Test that blank amounts render as zero."""
        formatter = ValueFormatter()

        assert formatter.format_currency(None) == "0.00"
        assert formatter.format_currency("") == "0.00"
        assert formatter.format_currency("  ") == "0.00"

    def test_format_non_numeric_currency(self, caplog):
        """Test that non-numeric amounts pass through with a warning."""
        formatter = ValueFormatter()

        assert formatter.format_currency("N/A") == "N/A"
        assert formatter.format_currency("Infinity") == "Infinity"
        assert "Could not parse currency" in caplog.text
