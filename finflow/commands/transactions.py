"""Transaction management commands (add, edit, delete, list)."""

import sys
import tomllib
from pathlib import Path

import pandas as pd
import typer
from rich.console import Console
from rich.table import Table

from finflow.config import Settings, load_settings
from finflow.dates import parse_iso_date
from finflow.domain.models import TransactionType
from finflow.domain.report import summarize_totals
from finflow.domain.transactions import (
    SORT_OPTIONS,
    Transaction,
    TransactionValidationError,
    build_transaction_fields,
    format_money_display,
    search_transactions,
    sort_transactions,
)
from finflow.store.backends import open_backend
from finflow.store.schema import get_data_dir, get_db_path
from finflow.store.transactions import TransactionStore

console = Console()


def load_settings_or_exit() -> Settings:
    """Load settings, exiting with a message if the config is unusable."""
    try:
        return load_settings()
    except (tomllib.TOMLDecodeError, ValueError) as e:
        console.print(f"[red]Invalid config: {e}[/red]", style="bold")
        sys.exit(1)


def storage_location(settings: Settings) -> Path | None:
    """Where the configured backend keeps its data (None for memory)."""
    if settings.storage_backend == "sqlite":
        return settings.storage_path or get_db_path()
    if settings.storage_backend == "file":
        return settings.storage_path or get_data_dir()
    return None


def require_storage(settings: Settings) -> None:
    """Exit with a message if the configured storage has not been created."""
    location = storage_location(settings)
    if location is not None and not location.exists():
        console.print("[red]Storage not found. Run 'finflow init' first.[/red]", style="bold")
        sys.exit(1)


def get_store(settings: Settings) -> TransactionStore:
    """Build the transaction store configured in settings."""
    backend = open_backend(settings.storage_backend, settings.storage_path)
    return TransactionStore(backend, key=settings.storage_key)


def normalize_date_input(value: str) -> str:
    """Normalize a user-entered date to YYYY-MM-DD.

    ISO dates are taken as they are; anything else (DD/MM/YYYY, "3 Jan 2025",
    ...) is parsed day first.

    Raises:
        ValueError: If the value is not a recognizable date.
    """
    try:
        return parse_iso_date(value).isoformat()
    except ValueError:
        pass
    try:
        parsed = pd.to_datetime(value, dayfirst=True)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Unrecognized date: {value}") from e
    if pd.isna(parsed):
        raise ValueError(f"Unrecognized date: {value}")
    return parsed.strftime("%Y-%m-%d")


def print_validation_errors(error: TransactionValidationError) -> None:
    """Print one line per invalid field."""
    console.print("[red]Invalid transaction:[/red]", style="bold")
    for field, message in error.errors.items():
        console.print(f"  [red]{field}[/red]: {message}")


def display_transaction(txn: Transaction, currency_symbol: str) -> None:
    """Print the fields of a single transaction."""
    console.print(f"  ID: {txn.id}")
    console.print(f"  Date: {txn.date}")
    console.print(f"  Description: {txn.description}")
    console.print(f"  Type: {txn.type.value}")
    console.print(f"  Amount: {format_money_display(txn.amount, currency_symbol)}")


def add_command(
    date: str,
    description: str,
    amount: float,
    txn_type: str = "expense",
) -> None:
    """Add a transaction.

    Args:
        date: Transaction date (YYYY-MM-DD, DD/MM/YYYY, or other formats).
        description: Transaction description.
        amount: Amount, always entered as a positive number.
        txn_type: "income" or "expense"; decides the stored sign.
    """
    settings = load_settings_or_exit()
    require_storage(settings)

    try:
        normalized_date = normalize_date_input(date)
    except ValueError as e:
        console.print(f"[red]Invalid date format: {e}[/red]")
        console.print("[dim]Accepted formats: YYYY-MM-DD, DD/MM/YYYY, DD-MM-YYYY, etc.[/dim]")
        sys.exit(1)

    try:
        fields = build_transaction_fields(amount, normalized_date, description, txn_type)
    except TransactionValidationError as e:
        print_validation_errors(e)
        sys.exit(1)

    store = get_store(settings)
    txn = store.create(fields)

    console.print("[green]✓[/green] Transaction added:")
    display_transaction(txn, settings.currency_symbol)


def edit_command(
    transaction_id: str,
    date: str | None = None,
    description: str | None = None,
    amount: float | None = None,
    txn_type: str | None = None,
) -> None:
    """Edit fields of an existing transaction.

    Args:
        transaction_id: Transaction ID (from 'finflow list').
        date: New date, if changing.
        description: New description, if changing.
        amount: New positive amount, if changing.
        txn_type: New type, if changing; the amount sign follows it.
    """
    settings = load_settings_or_exit()
    require_storage(settings)
    store = get_store(settings)

    existing = store.get(transaction_id)
    if existing is None:
        console.print(f"[red]Transaction {transaction_id} not found[/red]")
        sys.exit(1)

    if date is None and description is None and amount is None and txn_type is None:
        console.print("[yellow]Nothing to change (use --date, --description, --amount or --type)[/yellow]")
        return

    try:
        normalized_date = normalize_date_input(date) if date is not None else existing.date
    except ValueError as e:
        console.print(f"[red]Invalid date format: {e}[/red]")
        sys.exit(1)

    try:
        fields = build_transaction_fields(
            amount if amount is not None else abs(existing.amount),
            normalized_date,
            description if description is not None else existing.description,
            txn_type if txn_type is not None else existing.type,
        )
    except TransactionValidationError as e:
        print_validation_errors(e)
        sys.exit(1)

    partial: dict[str, object] = {}
    if date is not None:
        partial["date"] = fields["date"]
    if description is not None:
        partial["description"] = fields["description"]
    if amount is not None or txn_type is not None:
        partial["amount"] = fields["amount"]
    if txn_type is not None:
        partial["type"] = fields["type"]

    updated = store.update(transaction_id, partial)
    if updated is None:
        console.print(f"[red]Transaction {transaction_id} not found[/red]")
        sys.exit(1)

    console.print(f"[green]✓[/green] Updated transaction {transaction_id}:")
    display_transaction(updated, settings.currency_symbol)


def delete_command(transaction_id: str, yes: bool = False) -> None:
    """Delete a transaction after confirmation.

    Args:
        transaction_id: Transaction ID (from 'finflow list').
        yes: Skip the confirmation prompt.
    """
    settings = load_settings_or_exit()
    require_storage(settings)
    store = get_store(settings)

    txn = store.get(transaction_id)
    if txn is None:
        console.print(f"[red]Transaction {transaction_id} not found[/red]")
        sys.exit(1)

    display_transaction(txn, settings.currency_symbol)

    if not yes and not typer.confirm("Are you sure you want to delete this transaction?", default=False):
        console.print("[dim]Cancelled[/dim]")
        return

    if not store.delete(transaction_id):
        console.print(f"[red]Transaction {transaction_id} not found[/red]")
        sys.exit(1)

    console.print(f"[green]✓[/green] Deleted transaction {transaction_id}")


def list_command(
    search: str | None = None,
    sort_by: str = "date",
    limit: int = 50,
    all: bool = False,
) -> None:
    """List transactions, optionally filtered and sorted."""
    if sort_by not in SORT_OPTIONS:
        console.print(f"[red]Invalid sort option: {sort_by} (use {' or '.join(SORT_OPTIONS)})[/red]")
        sys.exit(1)

    settings = load_settings_or_exit()
    store = get_store(settings)

    transactions = store.list()
    matches = sort_transactions(search_transactions(transactions, search), sort_by)

    if not matches:
        if search:
            console.print(f"[yellow]No transactions match '{search}'[/yellow]")
        else:
            console.print("[yellow]No transactions yet (use 'finflow add' to record one)[/yellow]")
        return

    shown = matches if all else matches[:limit]

    title = f"Transactions (showing {len(shown)} of {len(matches)})"
    table = Table(title=title)
    table.add_column("ID", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Type", style="magenta")
    table.add_column("Amount", justify="right")

    for txn in shown:
        amount_display = format_money_display(txn.amount, settings.currency_symbol)
        color = "red" if txn.type == TransactionType.EXPENSE else "green"
        table.add_row(txn.id, txn.date, txn.description, txn.type.value, f"[{color}]{amount_display}[/{color}]")

    console.print(table)

    totals = summarize_totals(transactions)
    symbol = settings.currency_symbol
    console.print(
        f"Balance: [bold]{format_money_display(totals.balance, symbol)}[/bold]  "
        f"Income: [green]{format_money_display(totals.income, symbol, include_sign=False)}[/green]  "
        f"Expenses: [red]{format_money_display(totals.expenses, symbol, include_sign=False)}[/red]"
    )
