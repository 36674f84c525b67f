"""Date utilities for finflow.

Pure functions for month arithmetic and date parsing.
"""

import calendar
from datetime import date


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Get the first and last day of a calendar month (both inclusive)."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move a (year, month) pair by delta months, forwards or backwards.

    Args:
        year: Calendar year.
        month: Month number (1-12).
        delta: Number of months to move; negative moves back in time.

    Returns:
        Tuple of (year, month) after shifting.
    """
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def trailing_months(reference: date, count: int) -> list[tuple[int, int]]:
    """List the calendar months of a trailing window, oldest first.

    The window ends with the month containing ``reference`` and covers
    ``count`` months in total.

    Args:
        reference: Any date inside the last month of the window.
        count: Number of months in the window (must be positive).

    Returns:
        List of (year, month) tuples in ascending order.

    Raises:
        ValueError: If count is not positive.
    """
    if count < 1:
        raise ValueError("count must be positive")
    return [shift_month(reference.year, reference.month, offset) for offset in range(1 - count, 1)]


def parse_iso_date(value: str) -> date:
    """Parse a YYYY-MM-DD date, ignoring any time part after it.

    Raises:
        ValueError: If the first ten characters are not a valid ISO date.
    """
    return date.fromisoformat(value.strip()[:10])
