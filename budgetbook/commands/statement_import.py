"""Import command for adding transactions from a bank statement."""

import os
import sqlite3
import sys
from pathlib import Path

from rich.console import Console

from budgetbook.commands.common import open_ledger, require_session, save_ledger
from budgetbook.commands.transactions import render_transactions
from budgetbook.config import get_import_settings
from budgetbook.domain.ledger import LedgerError
from budgetbook.integrations.statement import (
    JsonStatementExtractor,
    LLMStatementExtractor,
    StatementExtractor,
    StatementImportError,
)
from budgetbook.store.queries import StaleLedgerError

console = Console()


def build_extractor(json_input: bool) -> StatementExtractor:
    """Choose the extractor for the import command.

    Args:
        json_input: The statement file is already structured JSON.

    Returns:
        Extractor instance.
    """
    if json_input:
        return JsonStatementExtractor()

    settings = get_import_settings()
    api_key = os.environ.get(settings["api_key_env"])
    if not api_key:
        console.print(f"[red]Set {settings['api_key_env']} to import statements[/red]")
        sys.exit(1)

    return LLMStatementExtractor(
        api_base=settings["api_base"],
        model=settings["model"],
        api_key=api_key,
        timeout_seconds=float(settings["timeout_seconds"]),
    )


def import_command(path: str, json_input: bool = False) -> None:
    """Import transactions from a statement file.

    Rows are added only after the whole statement has been extracted.
    """
    user_id = require_session()

    statement_path = Path(path).expanduser()
    if not statement_path.is_file():
        console.print(f"[red]File not found: {statement_path}[/red]")
        sys.exit(1)

    extractor = build_extractor(json_input)

    try:
        snapshot = open_ledger(user_id)
        category_names = [c.name for c in snapshot.ledger.categories]

        with console.status("Extracting transactions..."):
            rows = extractor.extract(statement_path.read_bytes(), category_names)

        if not rows:
            console.print("[yellow]No transactions found in statement[/yellow]")
            return

        imported = snapshot.ledger.import_transactions(rows)
        save_ledger(user_id, snapshot, imported)
    except (StatementImportError, LedgerError, StaleLedgerError) as e:
        console.print(f"[red]Import failed: {e}[/red]")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)

    added = list(imported.transactions[snapshot.ledger.transaction_size() :])
    render_transactions(imported, added)
    console.print(f"[green]✓[/green] Imported {len(added)} transactions")
