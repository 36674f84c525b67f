"""Summary command: six-month income and expense chart."""

import sys
from datetime import date, datetime

from rich.console import Console
from rich.table import Table

from finflow.commands.transactions import get_store, load_settings_or_exit
from finflow.domain.models import Month
from finflow.domain.report import (
    WINDOW_MONTHS,
    MonthlyExpense,
    aggregate_monthly,
    calculate_histogram_bar_length,
    summarize_window,
)
from finflow.domain.transactions import format_money_display

console = Console()

BAR_WIDTH = 30


def compute_reference_date(month: Month | None, today: date | None = None) -> date:
    """Pick the reference date for the summary window.

    Args:
        month: Optional last month of the window (YYYY-MM format).
        today: Date to use when no month is given. If None, uses today.

    Returns:
        A date inside the last month of the window.

    Raises:
        ValueError: If month is not in YYYY-MM format.
    """
    if month:
        return datetime.strptime(month, "%Y-%m").date()
    return today or date.today()


def render_month_line(
    entry: MonthlyExpense,
    histogram: bool,
    max_amount: float,
    currency_symbol: str,
) -> tuple[str, str, str, str]:
    """Format the income, expenses, net and bar cells for one month."""
    income = format_money_display(entry.income, currency_symbol, include_sign=False)
    expenses = format_money_display(entry.expenses, currency_symbol, include_sign=False)
    net_amount = entry.income - entry.expenses
    net_color = "green" if net_amount >= 0 else "red"
    net = f"[{net_color}]{format_money_display(net_amount, currency_symbol)}[/{net_color}]"

    bar = ""
    if histogram:
        income_bar = "█" * calculate_histogram_bar_length(entry.income, max_amount, BAR_WIDTH)
        expense_bar = "█" * calculate_histogram_bar_length(entry.expenses, max_amount, BAR_WIDTH)
        bar = f"[green]{income_bar}[/green]\n[red]{expense_bar}[/red]"

    return income, expenses, net, bar


def summary_command(month: str | None = None, histogram: bool = True) -> None:
    """Show income and expenses for the last six months."""
    try:
        reference = compute_reference_date(Month(month) if month else None)
    except ValueError:
        console.print(f"[red]Invalid month: {month} (expected YYYY-MM)[/red]")
        sys.exit(1)

    settings = load_settings_or_exit()
    store = get_store(settings)

    monthly = aggregate_monthly(store.list(), reference)
    max_amount = max((max(m.income, m.expenses) for m in monthly), default=0)
    symbol = settings.currency_symbol

    table = Table(title=f"Last {WINDOW_MONTHS} months ({monthly[0].month} - {monthly[-1].month})")
    table.add_column("Month", style="cyan")
    table.add_column("Income", justify="right", style="green")
    table.add_column("Expenses", justify="right", style="red")
    table.add_column("Net", justify="right")
    if histogram:
        table.add_column("")

    for entry in monthly:
        income, expenses, net, bar = render_month_line(entry, histogram, max_amount, symbol)
        if histogram:
            table.add_row(entry.month, income, expenses, net, bar)
        else:
            table.add_row(entry.month, income, expenses, net)

    console.print(table)

    window = summarize_window(monthly)
    net_color = "green" if window.net >= 0 else "red"
    console.print(
        f"Total income: [green]{format_money_display(window.income, symbol, include_sign=False)}[/green]  "
        f"Total expenses: [red]{format_money_display(window.expenses, symbol, include_sign=False)}[/red]  "
        f"Net flow: [{net_color}]{format_money_display(window.net, symbol)}[/{net_color}]"
    )
