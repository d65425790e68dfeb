"""Transaction management commands (list, add, edit, remove)."""

import sqlite3
import sys

from rich.console import Console
from rich.table import Table

from budgetbook.commands.common import (
    format_money,
    open_ledger,
    parse_date_input,
    parse_money,
    require_session,
    save_ledger,
)
from budgetbook.domain.ledger import Ledger, LedgerError
from budgetbook.domain.models import (
    INCOME_CATEGORY_ID,
    UNCATEGORIZED_CATEGORY_ID,
    UNCATEGORIZED_CATEGORY_NAME,
    CategoryId,
    Transaction,
    TransactionType,
)
from budgetbook.domain.search import SortDirection, SortField, SortState, search_transactions, sort_transactions
from budgetbook.store.queries import StaleLedgerError

console = Console()


def resolve_category_option(ledger: Ledger, category: str | None) -> CategoryId | None:
    """Resolve a --category option given as an id or a name (case-insensitive)."""
    if not category:
        return None
    if ledger.get_category_by_id(category) is not None:
        return CategoryId(category)
    wanted = category.strip().lower()
    for c in ledger.categories:
        if c.name.lower() == wanted:
            return c.id
    console.print(f"[red]Unknown category '{category}'[/red]")
    sys.exit(1)


def render_transactions(ledger: Ledger, transactions: list[Transaction]) -> None:
    """Render a transaction table."""
    noun = "transaction" if len(transactions) == 1 else "transactions"
    table = Table(title=f"{len(transactions)} {noun} total")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Date", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Category", style="magenta")
    table.add_column("Amount", justify="right")

    for t in transactions:
        category = ledger.get_category_by_id(t.category_id)
        # Dangling references display as Uncategorized
        category_name = category.name if category else UNCATEGORIZED_CATEGORY_NAME
        if t.type is TransactionType.INCOME:
            amount = f"[green]+{format_money(t.amount)}[/green]"
        else:
            amount = f"[red]-{format_money(t.amount)}[/red]"
        table.add_row(t.id, t.date.isoformat(), t.description, category_name, amount)

    console.print(table)


def list_transactions_command(
    search: str | None = None,
    sort: SortField = SortField.DATE,
    descending: bool = True,
) -> None:
    """List transactions matching a search, sorted by a column."""
    user_id = require_session()

    try:
        ledger = open_ledger(user_id).ledger
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    state = SortState(field=sort, direction=SortDirection.DESC if descending else SortDirection.ASC)
    transactions = sort_transactions(search_transactions(ledger, search), state)

    if not transactions:
        console.print("[yellow]No transactions found[/yellow]")
        return

    render_transactions(ledger, transactions)


def add_transaction_command(
    date: str,
    description: str,
    amount: str,
    income: bool = False,
    category: str | None = None,
) -> None:
    """Record an income or expense."""
    user_id = require_session()

    try:
        day = parse_date_input(date)
    except ValueError as e:
        console.print(f"[red]Invalid date format: {e}[/red]")
        console.print("[dim]Accepted formats: YYYY-MM-DD, DD/MM/YYYY, DD-MM-YYYY, etc.[/dim]")
        sys.exit(1)

    cents = parse_money(amount)
    if cents is None or cents <= 0:
        console.print("[red]Amount must be greater than zero[/red]")
        sys.exit(1)

    if not description.strip():
        console.print("[red]Description is required[/red]")
        sys.exit(1)

    try:
        snapshot = open_ledger(user_id)
        ledger = snapshot.ledger

        if income:
            category_id = INCOME_CATEGORY_ID
        else:
            category_id = resolve_category_option(ledger, category) or UNCATEGORIZED_CATEGORY_ID

        transaction = Transaction(
            id=ledger.next_transaction_id(),
            date=day,
            amount=cents,
            type=TransactionType.INCOME if income else TransactionType.EXPENSE,
            description=description.strip(),
            category_id=category_id,
        )
        save_ledger(user_id, snapshot, ledger.add_transaction(transaction))
    except (LedgerError, StaleLedgerError) as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Added transaction {transaction.id}: {transaction.description}")


def edit_transaction_command(
    transaction_id: str,
    description: str | None = None,
    category: str | None = None,
) -> None:
    """Change a transaction's description or category."""
    user_id = require_session()

    try:
        snapshot = open_ledger(user_id)
        ledger = snapshot.ledger
        if ledger.get_transaction_by_id(transaction_id) is None:
            console.print(f"[yellow]No transaction with id {transaction_id}[/yellow]")
            return
        category_id = resolve_category_option(ledger, category)
        edited = ledger.edit_transaction(transaction_id, description=description, category_id=category_id)
        save_ledger(user_id, snapshot, edited)
    except (LedgerError, StaleLedgerError) as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Updated transaction {transaction_id}")


def remove_transaction_command(transaction_id: str) -> None:
    """Delete a transaction."""
    user_id = require_session()

    try:
        snapshot = open_ledger(user_id)
        if snapshot.ledger.get_transaction_by_id(transaction_id) is None:
            console.print(f"[yellow]No transaction with id {transaction_id}[/yellow]")
            return
        save_ledger(user_id, snapshot, snapshot.ledger.remove_transaction(transaction_id))
    except StaleLedgerError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Removed transaction {transaction_id}")
