"""CLI entry point for finflow."""

import typer

from finflow.commands.admin import backup_command, init_command
from finflow.commands.report import summary_command
from finflow.commands.transactions import add_command, delete_command, edit_command, list_command
from finflow.log import configure_logging

app = typer.Typer(
    name="finflow",
    help="FinanceFlow - track your income and expenses",
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """FinanceFlow - track your income and expenses."""
    configure_logging(verbose)


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing config (stored data is kept)"),
    backend: str = typer.Option("sqlite", "--backend", help="Storage backend: sqlite, file or memory"),
) -> None:
    """Initialize finflow storage and configuration."""
    init_command(force, backend)


@app.command(name="backup")
def backup(
    output_dir: str = typer.Option(None, "--output", "-o", help="Backup directory (default: ~/.finflow/backups)"),
) -> None:
    """Backup your transactions and configuration files."""
    backup_command(output_dir)


@app.command()
def add(
    date: str,
    description: str,
    amount: float,
    txn_type: str = typer.Option("expense", "--type", "-t", help="Transaction type: income or expense"),
) -> None:
    """Record a transaction (enter the amount as a positive number)."""
    add_command(date, description, amount, txn_type)


@app.command()
def edit(
    transaction_id: str,
    date: str = typer.Option(None, "--date", help="New date"),
    description: str = typer.Option(None, "--description", "-d", help="New description"),
    amount: float = typer.Option(None, "--amount", "-a", help="New amount (positive)"),
    txn_type: str = typer.Option(None, "--type", "-t", help="New type: income or expense"),
) -> None:
    """Edit one of your transactions."""
    edit_command(transaction_id, date, description, amount, txn_type)


@app.command()
def delete(
    transaction_id: str,
    yes: bool = typer.Option(False, "--yes", "-y", help="Don't ask for confirmation"),
) -> None:
    """Delete one of your transactions."""
    delete_command(transaction_id, yes)


@app.command(name="list")
def list_transactions(
    search: str = typer.Option(None, "--search", "-s", help="Only show descriptions containing this text"),
    sort_by: str = typer.Option("date", "--sort", help="Sort by 'date' or 'amount'"),
    limit: int = typer.Option(50, help="Maximum transactions to show"),
    all: bool = typer.Option(False, "--all", "-a", help="Show all your transactions"),
) -> None:
    """List your transactions."""
    list_command(search, sort_by, limit, all)


@app.command()
def summary(
    month: str = typer.Option(None, "--month", help="Last month of the window (YYYY-MM, default: this month)"),
    histogram: bool = typer.Option(True, help="Show bars for income and expenses"),
) -> None:
    """Show your income and expenses for the last six months."""
    summary_command(month, histogram)


if __name__ == "__main__":
    app()
