"""CLI entry point for budgetbook."""

import logging

import typer
from rich.logging import RichHandler

from budgetbook.commands.admin import init_command, login_command, logout_command, register_command
from budgetbook.commands.categories import (
    add_category_command,
    edit_category_command,
    list_categories_command,
    remove_category_command,
)
from budgetbook.commands.report import analytics_command, summary_command
from budgetbook.commands.statement_import import import_command
from budgetbook.commands.transactions import (
    add_transaction_command,
    edit_transaction_command,
    list_transactions_command,
    remove_transaction_command,
)
from budgetbook.domain.search import SortField

app = typer.Typer(
    name="budgetbook",
    help="Personal budgeting: categories, monthly budgets and transactions",
    add_completion=False,
)
category_app = typer.Typer(help="Manage spending categories and their budgets")
transaction_app = typer.Typer(help="Record and browse income and expenses")
app.add_typer(category_app, name="category")
app.add_typer(transaction_app, name="transaction")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Personal budgeting: categories, monthly budgets and transactions."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing database and config"),
) -> None:
    """Initialize budgetbook database and configuration."""
    init_command(force)


@app.command()
def register(
    email: str,
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
) -> None:
    """Create an account and log in."""
    register_command(email, password)


@app.command()
def login(
    email: str,
    password: str = typer.Option(..., prompt=True, hide_input=True),
) -> None:
    """Log in to your account."""
    login_command(email, password)


@app.command()
def logout() -> None:
    """Log out."""
    logout_command()


@category_app.command(name="list")
def category_list() -> None:
    """List your categories."""
    list_categories_command()


@category_app.command(name="add")
def category_add(
    name: str,
    budget: str = typer.Option(..., "--budget", "-b", help="Monthly budget (in $)"),
    color: str = typer.Option("#3b82f6", "--color", "-c", help="Display color"),
) -> None:
    """Add a category with a monthly budget."""
    add_category_command(name, budget, color)


@category_app.command(name="edit")
def category_edit(
    category_id: str,
    name: str = typer.Option(None, "--name", help="New name"),
    budget: str = typer.Option(None, "--budget", "-b", help="New monthly budget (in $)"),
    color: str = typer.Option(None, "--color", "-c", help="New display color"),
) -> None:
    """Edit a category's name, budget or color."""
    edit_category_command(category_id, name, budget, color)


@category_app.command(name="remove")
def category_remove(
    category_id: str,
    keep_transactions: bool = typer.Option(
        False, "--keep-transactions", help="Leave transactions pointing at the removed category"
    ),
) -> None:
    """Remove a category (its transactions move to Uncategorized)."""
    remove_category_command(category_id, keep_transactions)


@transaction_app.command(name="list")
def transaction_list(
    search: str = typer.Option(
        None, "--search", "-s", help="Search text, or @cat:NAME, @type:income|expense, @date:M-YYYY"
    ),
    sort: SortField = typer.Option(SortField.DATE, "--sort", help="Column to sort by"),
    ascending: bool = typer.Option(False, "--asc", help="Sort ascending (default: descending)"),
) -> None:
    """List your transactions."""
    list_transactions_command(search, sort, not ascending)


@transaction_app.command(name="add")
def transaction_add(
    date: str,
    description: str,
    amount: str,
    income: bool = typer.Option(False, "--income", help="Record income instead of an expense"),
    category: str = typer.Option(None, "--category", help="Category name or id (expenses only)"),
) -> None:
    """Record an expense (or income with --income)."""
    add_transaction_command(date, description, amount, income, category)


@transaction_app.command(name="edit")
def transaction_edit(
    transaction_id: str,
    description: str = typer.Option(None, "--description", "-d", help="New description"),
    category: str = typer.Option(None, "--category", help="New category name or id"),
) -> None:
    """Edit a transaction's description or category."""
    edit_transaction_command(transaction_id, description, category)


@transaction_app.command(name="remove")
def transaction_remove(transaction_id: str) -> None:
    """Remove a transaction."""
    remove_transaction_command(transaction_id)


@app.command()
def summary(
    month: str = typer.Option(None, "--month", help="Specific month (M-YYYY)"),
) -> None:
    """Show your monthly totals and budget usage."""
    summary_command(month)


@app.command()
def analytics(
    month: str = typer.Option(None, "--month", help="Specific month (M-YYYY)"),
    histogram: bool = typer.Option(True, help="Show bars for monthly trends"),
) -> None:
    """Show budget successes, failures and monthly trends."""
    analytics_command(month, histogram)


@app.command(name="import")
def import_statement(
    path: str,
    json_input: bool = typer.Option(False, "--json", help="File is already-extracted JSON"),
) -> None:
    """Import transactions from a bank statement."""
    import_command(path, json_input)


if __name__ == "__main__":
    app()
