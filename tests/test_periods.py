"""Tests for calendar-month helpers."""

from datetime import date

import pytest

from periods import (
    add_months,
    current_period,
    month_bounds,
    month_reference,
    parse_month,
    period_label,
    shift_period,
)


class TestAddMonths:
    """Tests for add_months."""

    def test_keeps_day(self):
        assert add_months(date(2024, 1, 15), 1) == date(2024, 2, 15)
        assert add_months(date(2024, 11, 10), 3) == date(2025, 2, 10)

    def test_clamps_to_month_end(self):
        """Test that Jan 31 + 1 month is the last day of February."""
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)

    def test_clamp_does_not_carry_over(self):
        """Test that stepping from the start date restores the original day."""
        assert add_months(date(2024, 1, 31), 2) == date(2024, 3, 31)

    def test_negative_offset(self):
        assert add_months(date(2024, 3, 31), -1) == date(2024, 2, 29)


class TestPeriodKeys:
    """Tests for YYYY-MM period keys."""

    def test_month_reference(self):
        assert month_reference(date(2024, 3, 9)) == "2024-03"

    def test_parse_month(self):
        assert parse_month("2024-03") == date(2024, 3, 1)

    @pytest.mark.parametrize("value", ["2024-13", "2024-3", "march", "", None])
    def test_parse_month_rejects_invalid(self, value):
        with pytest.raises(ValueError):
            parse_month(value)

    def test_shift_period(self):
        assert shift_period("2024-01", -1) == "2023-12"
        assert shift_period("2024-12", 1) == "2025-01"

    def test_month_bounds(self):
        assert month_bounds("2024-02") == (date(2024, 2, 1), date(2024, 2, 29))

    def test_period_label(self):
        assert period_label("2024-03") == "March 2024"

    def test_current_period(self):
        assert current_period(date(2024, 7, 4)) == "2024-07"
