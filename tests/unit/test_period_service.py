"""
Unit tests for period resolution.
"""

import pytest
from datetime import date

from models.period import PeriodType
from services.period_service import resolve_period, month_period, week_period
from exceptions import InvalidPeriodError


class TestMonthPeriod:
    """Tests for month selectors."""

    def test_january(self):
        period = resolve_period("2026-01")

        assert period.period_type == PeriodType.MONTH
        assert period.start == date(2026, 1, 1)
        assert period.end == date(2026, 1, 31)
        assert period.sale_date == date(2026, 1, 31)
        assert period.label == "2026-01"
        assert period.reference == "import_2026-01"
        assert period.description == "Import 2026-01"

    def test_leap_february(self):
        period = month_period(2024, 2)
        assert period.end == date(2024, 2, 29)
        assert period.days == 29

    def test_single_digit_month_is_padded(self):
        period = resolve_period("2026-3")
        assert period.label == "2026-03"
        assert period.end == date(2026, 3, 31)

    @pytest.mark.parametrize("selector", ["2026-00", "2026-13"])
    def test_month_out_of_range(self, selector):
        with pytest.raises(InvalidPeriodError):
            resolve_period(selector)

    @pytest.mark.parametrize("selector", ["0000-01", "0000-W01"])
    def test_year_zero_rejected(self, selector):
        with pytest.raises(InvalidPeriodError) as exc:
            resolve_period(selector)

        assert exc.value.status_code == 422


class TestWeekPeriod:
    """Tests for ISO week selectors."""

    def test_week_runs_monday_to_sunday(self):
        period = resolve_period("2026-W02")

        assert period.period_type == PeriodType.WEEK
        assert period.start == date(2026, 1, 5)
        assert period.end == date(2026, 1, 11)
        assert period.start.weekday() == 0
        assert period.end.weekday() == 6
        assert period.sale_date == period.end
        assert period.days == 7
        assert period.reference == "import_2026-W02"

    def test_week_one_can_start_in_previous_year(self):
        """ISO week 1 contains January 4th."""
        period = week_period(2026, 1)
        assert period.start == date(2025, 12, 29)
        assert period.end == date(2026, 1, 4)

    def test_lowercase_w_accepted(self):
        assert resolve_period("2026-w2").label == "2026-W02"

    def test_week_53_only_in_long_years(self):
        assert resolve_period("2026-W53").end == date(2027, 1, 3)
        with pytest.raises(InvalidPeriodError):
            resolve_period("2025-W53")

    def test_week_zero_rejected(self):
        with pytest.raises(InvalidPeriodError):
            resolve_period("2026-W00")

    def test_contains(self):
        period = resolve_period("2026-W02")
        assert period.contains(date(2026, 1, 5))
        assert period.contains(date(2026, 1, 11))
        assert not period.contains(date(2026, 1, 12))


class TestInvalidSelector:

    @pytest.mark.parametrize("selector", [None, "", "   ", "januar", "2026/01", "26-01", "2026-W"])
    def test_rejected(self, selector):
        with pytest.raises(InvalidPeriodError) as exc:
            resolve_period(selector)
        assert exc.value.code == "PERIOD_INVALID"
        assert exc.value.status_code == 422
