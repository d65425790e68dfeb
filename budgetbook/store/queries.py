"""Database query functions for ledgers."""

import logging
import sqlite3
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path

from budgetbook.domain.ledger import Ledger
from budgetbook.domain.models import (
    Category,
    CategoryId,
    Money,
    Transaction,
    TransactionId,
    TransactionType,
    default_categories,
)
from budgetbook.store.schema import get_db_path
from budgetbook.store.sync import Row, RowDiff, diff_rows

logger = logging.getLogger(__name__)

CATEGORY_COLUMNS = ("id", "created_at", "name", "color", "budget")
TRANSACTION_COLUMNS = ("id", "date", "amount", "type", "description", "category_id")


class StaleLedgerError(Exception):
    """The stored ledger changed since the caller loaded it."""

    def __init__(self, user_id: int, expected: int, actual: int) -> None:
        super().__init__(f"Ledger for user {user_id} is at revision {actual}, expected {expected}")
        self.user_id = user_id
        self.expected = expected
        self.actual = actual


@dataclass(frozen=True)
class LedgerSnapshot:
    """Immutable ledger as loaded, with the revision it was read at."""

    ledger: Ledger
    revision: int


def _connect(db_path: Path | None = None) -> sqlite3.Connection:
    """Create a database connection with row factory.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Database connection with row_factory configured.
    """
    if db_path is None:
        db_path = get_db_path()
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def _category_row(category: Category) -> Row:
    return (category.id, category.created_at.isoformat(), category.name, category.color, int(category.budget))


def _transaction_row(transaction: Transaction) -> Row:
    return (
        transaction.id,
        transaction.date.isoformat(),
        int(transaction.amount),
        transaction.type.value,
        transaction.description,
        transaction.category_id,
    )


def _category_from_row(row: sqlite3.Row) -> Category:
    return Category(
        id=CategoryId(row["id"]),
        name=row["name"],
        color=row["color"],
        budget=Money(row["budget"]),
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def _transaction_from_row(row: sqlite3.Row) -> Transaction:
    return Transaction(
        id=TransactionId(row["id"]),
        date=date.fromisoformat(row["date"]),
        amount=Money(row["amount"]),
        type=TransactionType(row["type"]),
        description=row["description"],
        category_id=CategoryId(row["category_id"]),
    )


def _select_rows(conn: sqlite3.Connection, table: str, columns: Sequence[str], user_id: int) -> list[sqlite3.Row]:
    cursor = conn.cursor()
    cursor.execute(
        f"SELECT {', '.join(columns)} FROM {table} WHERE user_id = ? ORDER BY CAST(id AS INTEGER), id",
        (user_id,),
    )
    return cursor.fetchall()


def _read_revision(conn: sqlite3.Connection, user_id: int) -> int:
    cursor = conn.cursor()
    cursor.execute("SELECT revision FROM ledger_revisions WHERE user_id = ?", (user_id,))
    row = cursor.fetchone()
    return int(row[0]) if row else 0


def _seed_default_categories(conn: sqlite3.Connection, user_id: int) -> None:
    cursor = conn.cursor()
    cursor.executemany(
        f"INSERT OR IGNORE INTO categories (user_id, {', '.join(CATEGORY_COLUMNS)}) VALUES (?, ?, ?, ?, ?, ?)",
        [(user_id, *_category_row(c)) for c in default_categories()],
    )
    logger.info("Seeded default categories for user %s", user_id)


def load_ledger(user_id: int, db_path: Path | None = None) -> LedgerSnapshot:
    """Load a user's ledger, seeding the reserved categories on first access.

    Args:
        user_id: Owner of the ledger.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        LedgerSnapshot with the ledger and its current revision.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        try:
            category_rows = _select_rows(conn, "categories", CATEGORY_COLUMNS, user_id)
            if not category_rows:
                _seed_default_categories(conn, user_id)
                conn.commit()
                category_rows = _select_rows(conn, "categories", CATEGORY_COLUMNS, user_id)

            transaction_rows = _select_rows(conn, "transactions", TRANSACTION_COLUMNS, user_id)
            revision = _read_revision(conn, user_id)
        except sqlite3.Error:
            conn.rollback()
            raise

    ledger = Ledger(
        categories=tuple(_category_from_row(row) for row in category_rows),
        transactions=tuple(_transaction_from_row(row) for row in transaction_rows),
    )
    return LedgerSnapshot(ledger=ledger, revision=revision)


def _apply_diff(
    conn: sqlite3.Connection,
    table: str,
    columns: Sequence[str],
    user_id: int,
    diff: RowDiff,
) -> None:
    cursor = conn.cursor()
    cursor.executemany(
        f"DELETE FROM {table} WHERE user_id = ? AND id = ?",
        [(user_id, row_id) for row_id in diff.deleted],
    )

    placeholders = ", ".join("?" for _ in range(len(columns) + 1))
    assignments = ", ".join(f"{col} = excluded.{col}" for col in columns[1:])
    cursor.executemany(
        f"""
        INSERT INTO {table} (user_id, {', '.join(columns)}) VALUES ({placeholders})
        ON CONFLICT (user_id, id) DO UPDATE SET {assignments}
        """,
        [(user_id, *row) for row in diff.inserted + diff.updated],
    )


def replace_ledger(
    user_id: int,
    categories: Sequence[Category],
    transactions: Sequence[Transaction],
    expected_revision: int | None = None,
    db_path: Path | None = None,
) -> int:
    """Replace a user's stored ledger with the given collections.

    Rows missing from the input are deleted, every other row is upserted.
    All writes commit together or not at all. A sync that changes nothing
    leaves the revision untouched.

    Args:
        user_id: Owner of the ledger.
        categories: Complete category collection.
        transactions: Complete transaction collection.
        expected_revision: Revision the caller loaded. If given and the stored
            revision differs, nothing is written.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        The stored revision after the sync.

    Raises:
        StaleLedgerError: If expected_revision does not match.
        ValueError: If a collection repeats an id.
        sqlite3.Error: If database operation fails.
    """
    conn = _connect(db_path)
    # Manual transaction control so the whole sync is one BEGIN/COMMIT
    conn.isolation_level = None

    try:
        conn.execute("BEGIN IMMEDIATE")

        revision = _read_revision(conn, user_id)
        if expected_revision is not None and expected_revision != revision:
            raise StaleLedgerError(user_id, expected_revision, revision)

        stored_categories = {
            row["id"]: tuple(row) for row in _select_rows(conn, "categories", CATEGORY_COLUMNS, user_id)
        }
        stored_transactions = {
            row["id"]: tuple(row) for row in _select_rows(conn, "transactions", TRANSACTION_COLUMNS, user_id)
        }
        category_diff = diff_rows(stored_categories, [_category_row(c) for c in categories])
        transaction_diff = diff_rows(stored_transactions, [_transaction_row(t) for t in transactions])

        if category_diff.is_empty and transaction_diff.is_empty:
            conn.execute("COMMIT")
            logger.debug("Ledger for user %s unchanged at revision %s", user_id, revision)
            return revision

        _apply_diff(conn, "categories", CATEGORY_COLUMNS, user_id, category_diff)
        _apply_diff(conn, "transactions", TRANSACTION_COLUMNS, user_id, transaction_diff)

        revision += 1
        conn.execute(
            """
            INSERT INTO ledger_revisions (user_id, revision) VALUES (?, ?)
            ON CONFLICT (user_id) DO UPDATE SET revision = excluded.revision
            """,
            (user_id, revision),
        )
        conn.execute("COMMIT")

    except Exception:
        if conn.in_transaction:
            conn.execute("ROLLBACK")
        raise
    finally:
        conn.close()

    logger.info(
        "Synced ledger for user %s to revision %s: categories -%d/+%d/~%d, transactions -%d/+%d/~%d",
        user_id,
        revision,
        len(category_diff.deleted),
        len(category_diff.inserted),
        len(category_diff.updated),
        len(transaction_diff.deleted),
        len(transaction_diff.inserted),
        len(transaction_diff.updated),
    )
    return revision
