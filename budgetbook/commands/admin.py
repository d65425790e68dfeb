"""Admin commands for init and account sessions."""

import sqlite3
import sys
from pathlib import Path

from rich.console import Console

from budgetbook.config import clear_session, create_default_config, get_config_path, set_session_user
from budgetbook.store.queries import load_ledger
from budgetbook.store.schema import database_exists, get_db_path, init_database
from budgetbook.store.users import AuthenticationError, UserExistsError, authenticate_user, register_user

console = Console()


def run_full_init(db_path: Path, config_path: Path) -> None:
    """Initialize new database and config."""
    console.print(f"[cyan]Initializing database at {db_path}...[/cyan]")
    init_database(db_path)
    console.print("[green]✓[/green] Database initialized")

    console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
    create_default_config(config_path)
    console.print("[green]✓[/green] Config file created (permissions: 600)")

    console.print("\n[green]Initialization complete![/green]", style="bold")
    console.print(f"[dim]Database: {db_path}[/dim]")
    console.print(f"[dim]Config: {config_path}[/dim]")


def init_command(force: bool = False) -> None:
    """Initialize budgetbook database and configuration."""
    db_path = get_db_path()
    config_path = get_config_path()

    db_exists = db_path.exists()
    config_exists = config_path.exists()

    try:
        # Guard: refuse to overwrite without force flag
        if not force and (db_exists or config_exists):
            console.print("[red]Initialization failed:[/red]", style="bold")
            if db_exists:
                console.print(f"  Database already exists: {db_path}")
            if config_exists:
                console.print(f"  Config already exists: {config_path}")
            console.print("\n[yellow]Use 'budgetbook init --force' to overwrite[/yellow]")
            sys.exit(1)

        if force and db_exists:
            db_path.unlink()

        run_full_init(db_path, config_path)

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)


def _require_database() -> Path:
    db_path = get_db_path()
    if not database_exists(db_path):
        console.print("[red]Database not found. Run 'budgetbook init' first.[/red]", style="bold")
        sys.exit(1)
    return db_path


def register_command(email: str, password: str) -> None:
    """Create an account and log in as it."""
    db_path = _require_database()

    try:
        user_id = register_user(email, password, db_path)
        # First load seeds the Income and Uncategorized categories
        load_ledger(user_id, db_path)
        set_session_user(user_id)
    except (UserExistsError, ValueError) as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Registered and logged in as {email.strip().lower()}")


def login_command(email: str, password: str) -> None:
    """Log in to an existing account."""
    db_path = _require_database()

    try:
        user_id = authenticate_user(email, password, db_path)
        set_session_user(user_id)
    except AuthenticationError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Logged in as {email.strip().lower()}")


def logout_command() -> None:
    """Forget the logged-in account."""
    clear_session()
    console.print("[green]✓[/green] Logged out")
