"""Tests for finflow.dates pure functions."""

from datetime import date

import pytest

from finflow.dates import month_bounds, parse_iso_date, shift_month, trailing_months


class TestMonthBounds:
    """Tests for month_bounds."""

    def test_thirty_one_day_month(self) -> None:
        """Should end on the 31st."""
        assert month_bounds(2025, 1) == (date(2025, 1, 1), date(2025, 1, 31))

    def test_february_non_leap_year(self) -> None:
        """Should end on the 28th in a non-leap year."""
        assert month_bounds(2025, 2) == (date(2025, 2, 1), date(2025, 2, 28))

    def test_february_leap_year(self) -> None:
        """Should end on the 29th in a leap year."""
        assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))

    def test_thirty_day_month(self) -> None:
        """Should end on the 30th."""
        assert month_bounds(2025, 4)[1] == date(2025, 4, 30)


class TestShiftMonth:
    """Tests for shift_month."""

    def test_back_within_year(self) -> None:
        """Should move back inside the same year."""
        assert shift_month(2025, 6, -5) == (2025, 1)

    def test_back_across_year(self) -> None:
        """Should wrap into the previous year."""
        assert shift_month(2025, 1, -5) == (2024, 8)

    def test_forward_across_year(self) -> None:
        """Should wrap into the next year."""
        assert shift_month(2025, 11, 3) == (2026, 2)

    def test_zero_delta(self) -> None:
        """Should return the same month."""
        assert shift_month(2025, 3, 0) == (2025, 3)


class TestTrailingMonths:
    """Tests for trailing_months."""

    def test_six_month_window_ascending(self) -> None:
        """Should end with the reference month, oldest first."""
        months = trailing_months(date(2025, 3, 15), 6)

        assert months == [(2024, 10), (2024, 11), (2024, 12), (2025, 1), (2025, 2), (2025, 3)]

    def test_single_month(self) -> None:
        """Should contain only the reference month."""
        assert trailing_months(date(2025, 3, 31), 1) == [(2025, 3)]

    def test_non_positive_count_raises(self) -> None:
        """Should reject an empty window."""
        with pytest.raises(ValueError):
            trailing_months(date(2025, 3, 1), 0)


class TestParseIsoDate:
    """Tests for parse_iso_date."""

    def test_plain_date(self) -> None:
        """Should parse YYYY-MM-DD."""
        assert parse_iso_date("2025-01-15") == date(2025, 1, 15)

    def test_ignores_time_part(self) -> None:
        """Should ignore anything after the date."""
        assert parse_iso_date("2025-01-15T10:30:00Z") == date(2025, 1, 15)

    def test_invalid_date_raises(self) -> None:
        """Should raise ValueError for non-dates."""
        with pytest.raises(ValueError):
            parse_iso_date("15/01/2025")
