"""
Unit tests for Norwegian amount parsing.
"""

import pytest
from decimal import Decimal

from utils.number_utils import parse_amount, ZERO
from exceptions import NumberParseError


class TestParseAmount:
    """Tests for parse_amount."""

    @pytest.mark.parametrize("raw, expected", [
        ("1 234,56 kr", Decimal("1234.56")),
        ("1.234,56", Decimal("1234.56")),
        ("1234.56", Decimal("1234.56")),
        ("10 000", Decimal("10000")),
        ("1.234.567,89", Decimal("1234567.89")),
        ("500", Decimal("500")),
        ("0,5", Decimal("0.5")),
        ("kr 99,90", Decimal("99.90")),
    ])
    def test_norwegian_formats(self, raw, expected):
        """Space/period thousands and comma decimals all parse."""
        assert parse_amount(raw) == expected

    def test_period_only_input_is_decimal_point(self):
        """Without a comma the period is a decimal point, not a thousands separator."""
        assert parse_amount("1234.56") != Decimal("123456")

    def test_non_breaking_space_thousands(self):
        assert parse_amount("12\u00a0345,00") == Decimal("12345.00")
        assert parse_amount("12\u202f345") == Decimal("12345")

    def test_negative_amount(self):
        """Credit notes keep their sign."""
        assert parse_amount("-1 250,50") == Decimal("-1250.50")

    def test_minus_only_counts_in_front(self):
        assert parse_amount("12-34") == Decimal("1234")

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", "kr", "-", "."])
    def test_absent_or_garbage_is_zero(self, raw):
        assert parse_amount(raw) == ZERO

    def test_strict_raises_on_garbage(self):
        with pytest.raises(NumberParseError) as exc:
            parse_amount("abc", strict=True)
        assert exc.value.code == "NUMBER_PARSE_ERROR"

    def test_strict_still_accepts_empty(self):
        """Empty cells are absent, not invalid."""
        assert parse_amount("", strict=True) == ZERO
        assert parse_amount(None, strict=True) == ZERO

    def test_strict_parses_valid_values(self):
        assert parse_amount("1 234,56 kr", strict=True) == Decimal("1234.56")
