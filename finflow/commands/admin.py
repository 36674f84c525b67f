"""Admin commands for init and backup."""

import shutil
import sqlite3
import sys
from datetime import datetime
from pathlib import Path

from rich.console import Console

from finflow.commands.transactions import load_settings_or_exit, storage_location
from finflow.config import Settings, create_default_config, get_config_path, load_settings
from finflow.store.backends import BACKEND_NAMES
from finflow.store.schema import init_database, init_file_store

console = Console()


def init_storage(settings: Settings) -> None:
    """Create the storage medium for the configured backend."""
    location = storage_location(settings)
    if location is None:
        console.print("[yellow]Memory backend selected: transactions will not be saved between runs[/yellow]")
        return

    if settings.storage_backend == "sqlite":
        console.print(f"[cyan]Initializing database at {location}...[/cyan]")
        init_database(location)
        console.print("[green]✓[/green] Database initialized")
    else:
        console.print(f"[cyan]Creating data directory at {location}...[/cyan]")
        init_file_store(location)
        console.print("[green]✓[/green] Data directory created")


def init_command(force: bool = False, backend: str = "sqlite") -> None:
    """Initialize finflow storage and configuration."""
    if backend not in BACKEND_NAMES:
        console.print(f"[red]Unknown backend: {backend} (use one of {', '.join(BACKEND_NAMES)})[/red]")
        sys.exit(1)

    config_path = get_config_path()

    try:
        if config_path.exists() and not force:
            # Existing config: make sure its storage exists, leave the file alone
            settings = load_settings_or_exit()
            console.print(f"[yellow]Config already exists: {config_path}[/yellow]")
            init_storage(settings)
            console.print("[yellow]Use 'finflow init --force' to overwrite the config[/yellow]")
            return

        console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
        create_default_config(config_path, backend=backend)
        console.print("[green]✓[/green] Config file created (permissions: 600)")

        init_storage(load_settings(config_path))

        console.print("\n[green]Initialization complete![/green]", style="bold")
        console.print(f"[dim]Config: {config_path}[/dim]")

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)


def backup_command(
    output_dir: str | None = None,
) -> None:
    """Backup stored transactions and configuration files."""
    config_path = get_config_path()

    if not config_path.exists():
        console.print("[red]Config not found. Run 'finflow init' first.[/red]", style="bold")
        sys.exit(1)

    settings = load_settings_or_exit()
    location = storage_location(settings)

    if location is None:
        console.print("[red]Memory backend has nothing to back up[/red]", style="bold")
        sys.exit(1)

    if not location.exists():
        console.print("[red]Storage not found. Run 'finflow init' first.[/red]", style="bold")
        sys.exit(1)

    # Determine backup directory
    if output_dir:
        backup_dir = Path(output_dir).expanduser()
    else:
        backup_dir = Path.home() / ".finflow" / "backups"

    backup_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    config_backup = backup_dir / f"config_{timestamp}.toml"

    try:
        if location.is_dir():
            data_backup = backup_dir / f"data_{timestamp}"
            shutil.copytree(location, data_backup)
        else:
            data_backup = backup_dir / f"finflow_{timestamp}.db"
            shutil.copy2(location, data_backup)
        console.print(f"[green]✓[/green] Transactions backed up to: {data_backup}")

        shutil.copy2(config_path, config_backup)
        console.print(f"[green]✓[/green] Config backed up to: {config_backup}")

        console.print("\n[green]Backup complete![/green]", style="bold")
        console.print(f"[dim]Backup directory: {backup_dir}[/dim]")

    except OSError as e:
        console.print(f"[red]Backup failed: {e}[/red]", style="bold")
        sys.exit(1)
