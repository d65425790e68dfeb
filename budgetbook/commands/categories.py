"""Category management commands (list, add, edit, remove)."""

import sqlite3
import sys
from datetime import datetime

from rich.console import Console
from rich.table import Table

from budgetbook.commands.common import format_money, open_ledger, parse_money, require_session, save_ledger
from budgetbook.domain.ledger import LedgerError
from budgetbook.domain.models import Category, Money
from budgetbook.store.queries import StaleLedgerError

console = Console()


def _parse_budget(budget: str) -> Money:
    amount = parse_money(budget)
    if amount is None or amount <= 0:
        console.print("[red]Budget must be an amount greater than zero[/red]")
        sys.exit(1)
    return amount


def list_categories_command() -> None:
    """Show all categories in ledger order."""
    user_id = require_session()

    try:
        ledger = open_ledger(user_id).ledger
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    table = Table(title=f"Categories ({ledger.category_size()})")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Color")
    table.add_column("Budget", justify="right")

    for category in ledger.categories:
        budget = "[dim]-[/dim]" if category.is_reserved else format_money(category.budget)
        table.add_row(category.id, category.name, f"[{category.color}]■[/] {category.color}", budget)

    console.print(table)


def add_category_command(name: str, budget: str, color: str) -> None:
    """Add a category with a monthly budget."""
    user_id = require_session()
    if not name.strip():
        console.print("[red]Category name must not be empty[/red]")
        sys.exit(1)
    amount = _parse_budget(budget)

    try:
        snapshot = open_ledger(user_id)
        ledger = snapshot.ledger
        category = Category(
            id=ledger.next_category_id(),
            name=name.strip(),
            color=color,
            budget=amount,
            created_at=datetime.now(),
        )
        save_ledger(user_id, snapshot, ledger.add_category(category))
    except (ValueError, StaleLedgerError) as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Added {category.name} ({format_money(amount)} / month)")


def edit_category_command(
    category_id: str,
    name: str | None = None,
    budget: str | None = None,
    color: str | None = None,
) -> None:
    """Change a category's name, budget or color."""
    user_id = require_session()
    amount = _parse_budget(budget) if budget is not None else None

    try:
        snapshot = open_ledger(user_id)
        if snapshot.ledger.get_category_by_id(category_id) is None:
            console.print(f"[yellow]No category with id {category_id}[/yellow]")
            return
        edited = snapshot.ledger.edit_category(category_id, name=name, color=color, budget=amount)
        save_ledger(user_id, snapshot, edited)
    except (ValueError, StaleLedgerError) as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Updated category {category_id}")


def remove_category_command(category_id: str, keep_transactions: bool = False) -> None:
    """Remove a category, moving its transactions to Uncategorized."""
    user_id = require_session()

    try:
        snapshot = open_ledger(user_id)
        category = snapshot.ledger.get_category_by_id(category_id)
        if category is None:
            console.print(f"[yellow]No category with id {category_id}[/yellow]")
            return
        removed = snapshot.ledger.remove_category(category_id, reassign=not keep_transactions)
        save_ledger(user_id, snapshot, removed)
    except (LedgerError, StaleLedgerError) as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Removed {category.name}")
