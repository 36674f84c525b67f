"""Pure functions for report calculations and aggregations.

This module contains the functional core for reporting operations:
- No I/O operations (no storage, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

Every function takes its reference date explicitly; nothing reads the clock.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime

from finflow.dates import month_bounds, parse_iso_date, trailing_months
from finflow.domain.models import TransactionType
from finflow.domain.transactions import Transaction

WINDOW_MONTHS = 6


@dataclass(frozen=True)
class MonthlyExpense:
    """Income and expense totals for one calendar month."""

    month: str
    income: float
    expenses: float


@dataclass(frozen=True)
class TransactionTotals:
    """Totals over a whole transaction collection."""

    balance: float
    income: float
    expenses: float


@dataclass(frozen=True)
class WindowSummary:
    """Totals over an aggregated window of months."""

    income: float
    expenses: float
    net: float


def format_month_label(year: int, month: int) -> str:
    """Format a month as abbreviated name and year (e.g., "Jan 2025")."""
    return date(year, month, 1).strftime("%b %Y")


def _dated(transactions: Iterable[Transaction]) -> list[tuple[date, Transaction]]:
    """Pair each transaction with its parsed date, dropping unparseable ones."""
    dated = []
    for txn in transactions:
        try:
            dated.append((parse_iso_date(txn.date), txn))
        except ValueError:
            continue
    return dated


def aggregate_monthly(
    transactions: Iterable[Transaction],
    reference_date: date | datetime,
    months: int = WINDOW_MONTHS,
) -> list[MonthlyExpense]:
    """Aggregate income and expenses per month over a trailing window.

    The window covers the month containing ``reference_date`` and the
    preceding months, oldest first. Months without transactions are
    included with zero totals. Transactions with unparseable dates are
    skipped.

    Args:
        transactions: Transactions to aggregate; not modified.
        reference_date: Any date inside the last month of the window.
        months: Window length in months.

    Returns:
        List of MonthlyExpense, exactly ``months`` long.
    """
    if isinstance(reference_date, datetime):
        reference_date = reference_date.date()

    dated = _dated(transactions)
    result = []

    for year, month in trailing_months(reference_date, months):
        start, end = month_bounds(year, month)
        in_month = [txn for txn_date, txn in dated if start <= txn_date <= end]

        expenses = sum(t.amount for t in in_month if t.type == TransactionType.EXPENSE)
        income = sum(t.amount for t in in_month if t.type == TransactionType.INCOME)

        result.append(
            MonthlyExpense(
                month=format_month_label(year, month),
                income=income,
                expenses=abs(expenses),
            )
        )

    return result


def summarize_totals(transactions: Iterable[Transaction]) -> TransactionTotals:
    """Compute balance, total income and total expenses.

    Args:
        transactions: Transactions to total.

    Returns:
        TransactionTotals; expenses is reported as a positive number.
    """
    items = list(transactions)
    income = sum(t.amount for t in items if t.type == TransactionType.INCOME)
    expenses = sum(t.amount for t in items if t.type == TransactionType.EXPENSE)
    return TransactionTotals(
        balance=sum(t.amount for t in items),
        income=income,
        expenses=abs(expenses),
    )


def summarize_window(monthly: Iterable[MonthlyExpense]) -> WindowSummary:
    """Total an aggregated window and compute its net flow."""
    items = list(monthly)
    income = sum(m.income for m in items)
    expenses = sum(m.expenses for m in items)
    return WindowSummary(income=income, expenses=expenses, net=income - expenses)


def calculate_histogram_bar_length(
    amount: float,
    max_amount: float,
    bar_width: int,
) -> int:
    """Calculate histogram bar length.

    Args:
        amount: Amount to display.
        max_amount: Maximum amount in dataset.
        bar_width: Maximum bar width in characters.

    Returns:
        Bar length in characters.
    """
    if max_amount <= 0:
        return 0
    return int((abs(amount) / max_amount) * bar_width)
