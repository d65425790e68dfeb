"""Helpers shared by CLI commands: parsing input and the load/save cycle."""

import math
import sys
from datetime import date

import pandas as pd
from rich.console import Console

from budgetbook.config import get_session_user
from budgetbook.dates import Period, default_to_current_period, parse_month_year_strict
from budgetbook.domain.ledger import Ledger
from budgetbook.domain.models import Money
from budgetbook.store.queries import LedgerSnapshot, load_ledger, replace_ledger
from budgetbook.store.schema import database_exists, get_db_path

console = Console()


def parse_money(amount_str: str) -> Money | None:
    """Parse money string to cents.

    Args:
        amount_str: String containing amount in dollars.

    Returns:
        Money amount in cents, or None if invalid or negative.
    """
    try:
        dollars = float(amount_str.replace("$", "").replace(",", "").strip())
        if not math.isfinite(dollars) or dollars < 0:
            return None
        return Money(round(dollars * 100))
    except ValueError:
        return None


def format_money(amount: Money) -> str:
    """Format cents for display (e.g., "$1,234.56" or "-$12.00")."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount) / 100:,.2f}"


def parse_date_input(raw_date: str) -> date:
    """Parse a user-supplied date.

    Uses pandas.to_datetime so ISO, European and other common formats work.

    Raises:
        ValueError: If the date cannot be parsed.
    """
    try:
        return pd.to_datetime(raw_date, dayfirst=True).date()
    except (ValueError, pd.errors.ParserError) as e:
        raise ValueError(f"Could not parse date '{raw_date}': {e}") from e


def resolve_month(month: str | None) -> Period:
    """Resolve the --month option. Exits on malformed input instead of guessing."""
    if not month:
        return default_to_current_period()
    try:
        return parse_month_year_strict(month)
    except ValueError:
        console.print(f"[red]Invalid month '{month}'. Use M-YYYY (e.g. 3-2024).[/red]")
        sys.exit(1)


def require_session() -> int:
    """Get the logged-in user id, exiting if there is none."""
    if not database_exists(get_db_path()):
        console.print("[red]Database not found. Run 'budgetbook init' first.[/red]", style="bold")
        sys.exit(1)

    user_id = get_session_user()
    if user_id is None:
        console.print("[red]Not logged in. Run 'budgetbook login EMAIL' first.[/red]", style="bold")
        sys.exit(1)
    return user_id


def open_ledger(user_id: int) -> LedgerSnapshot:
    return load_ledger(user_id, get_db_path())


def save_ledger(user_id: int, snapshot: LedgerSnapshot, ledger: Ledger) -> int:
    """Push the full collections of an edited ledger back to the store.

    Raises:
        StaleLedgerError: If the ledger changed since the snapshot was loaded.
    """
    return replace_ledger(
        user_id,
        ledger.categories,
        ledger.transactions,
        expected_revision=snapshot.revision,
        db_path=get_db_path(),
    )
