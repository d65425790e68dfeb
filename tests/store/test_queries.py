"""Tests for budgetbook.store ledger persistence against a temporary SQLite file."""

import sqlite3
from datetime import date
from pathlib import Path

import pytest

from budgetbook.domain.ledger import Ledger
from budgetbook.domain.models import (
    INCOME_CATEGORY_ID,
    UNCATEGORIZED_CATEGORY_ID,
    CategoryId,
    Money,
    Transaction,
    TransactionId,
    TransactionType,
)
from budgetbook.store.queries import StaleLedgerError, load_ledger, replace_ledger
from budgetbook.store.schema import database_exists, init_database
from budgetbook.store.users import register_user


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    path = tmp_path / "budgetbook.db"
    init_database(path)
    return path


@pytest.fixture
def user_id(db_path: Path) -> int:
    return register_user("ana@example.com", "secret", db_path)


def dump_rows(db_path: Path) -> tuple[list[tuple], list[tuple]]:
    conn = sqlite3.connect(db_path)
    try:
        categories = conn.execute("SELECT * FROM categories ORDER BY user_id, id").fetchall()
        transactions = conn.execute("SELECT * FROM transactions ORDER BY user_id, id").fetchall()
    finally:
        conn.close()
    return categories, transactions


class TestInitDatabase:
    """Tests for init_database."""

    def test_creates_file(self, tmp_path: Path) -> None:
        """Should create the database and parent directories."""
        path = tmp_path / "nested" / "budgetbook.db"
        init_database(path)

        assert database_exists(path)

    def test_is_idempotent(self, db_path: Path) -> None:
        """Should be safe to run twice."""
        init_database(db_path)

        assert database_exists(db_path)


class TestLoadLedger:
    """Tests for load_ledger."""

    def test_seeds_reserved_categories_on_first_access(self, db_path: Path, user_id: int) -> None:
        """Should create Income and Uncategorized for a new user."""
        snapshot = load_ledger(user_id, db_path)

        assert [(c.id, c.name) for c in snapshot.ledger.categories] == [
            (INCOME_CATEGORY_ID, "Income"),
            (UNCATEGORIZED_CATEGORY_ID, "Uncategorized"),
        ]
        assert snapshot.ledger.transactions == ()
        assert snapshot.revision == 0

    def test_seeding_happens_once(self, db_path: Path, user_id: int) -> None:
        """Should not duplicate seeds on later loads."""
        load_ledger(user_id, db_path)
        snapshot = load_ledger(user_id, db_path)

        assert snapshot.ledger.category_size() == 2

    def test_orders_by_numeric_id(self, db_path: Path, user_id: int, scenario_ledger: Ledger) -> None:
        """Should return rows sorted numerically, so "10" comes after "2"."""
        extra = Transaction(
            TransactionId("10"), date(2024, 3, 2), Money(1), TransactionType.EXPENSE, "x", CategoryId("1")
        )
        ledger = scenario_ledger.add_transaction(extra)
        replace_ledger(user_id, ledger.categories, ledger.transactions, db_path=db_path)

        loaded = load_ledger(user_id, db_path).ledger

        assert [t.id for t in loaded.transactions] == ["0", "1", "2", "10"]

    def test_users_are_isolated(self, db_path: Path, user_id: int, scenario_ledger: Ledger) -> None:
        """Should keep one user's rows out of another's ledger."""
        other = register_user("bo@example.com", "secret", db_path)
        replace_ledger(user_id, scenario_ledger.categories, scenario_ledger.transactions, db_path=db_path)

        snapshot = load_ledger(other, db_path)

        assert snapshot.ledger.category_size() == 2
        assert snapshot.ledger.transaction_size() == 0


class TestReplaceLedger:
    """Tests for replace_ledger."""

    def test_round_trip(self, db_path: Path, user_id: int, scenario_ledger: Ledger) -> None:
        """Should load back exactly what was stored."""
        replace_ledger(user_id, scenario_ledger.categories, scenario_ledger.transactions, db_path=db_path)

        loaded = load_ledger(user_id, db_path).ledger

        assert loaded == scenario_ledger
        assert [c.created_at for c in loaded.categories] == [c.created_at for c in scenario_ledger.categories]
        assert loaded.calculate_saving_rate("3-2024") == 92.0

    def test_deletes_rows_missing_from_input(self, db_path: Path, user_id: int, scenario_ledger: Ledger) -> None:
        """Should remove rows whose ids are absent."""
        replace_ledger(user_id, scenario_ledger.categories, scenario_ledger.transactions, db_path=db_path)
        smaller = scenario_ledger.remove_category("2").remove_transaction("0")

        replace_ledger(user_id, smaller.categories, smaller.transactions, db_path=db_path)
        loaded = load_ledger(user_id, db_path).ledger

        assert loaded.get_category_by_id("2") is None
        assert [t.id for t in loaded.transactions] == ["1", "2"]
        assert loaded.get_transaction_by_id("1").category_id == UNCATEGORIZED_CATEGORY_ID  # type: ignore[union-attr]

    def test_updates_rows_in_place(self, db_path: Path, user_id: int, scenario_ledger: Ledger) -> None:
        """Should overwrite changed rows with the same id."""
        replace_ledger(user_id, scenario_ledger.categories, scenario_ledger.transactions, db_path=db_path)
        edited = scenario_ledger.edit_category("2", budget=Money(50000)).edit_transaction("1", description="Market")

        replace_ledger(user_id, edited.categories, edited.transactions, db_path=db_path)
        loaded = load_ledger(user_id, db_path).ledger

        assert loaded.get_category_by_id("2").budget == Money(50000)  # type: ignore[union-attr]
        assert loaded.get_transaction_by_id("1").description == "Market"  # type: ignore[union-attr]

    def test_idempotent(self, db_path: Path, user_id: int, scenario_ledger: Ledger) -> None:
        """Should leave rows and revision unchanged when repeated."""
        first = replace_ledger(user_id, scenario_ledger.categories, scenario_ledger.transactions, db_path=db_path)
        rows_after_first = dump_rows(db_path)

        second = replace_ledger(user_id, scenario_ledger.categories, scenario_ledger.transactions, db_path=db_path)

        assert dump_rows(db_path) == rows_after_first
        assert second == first == 1

    def test_revision_increments_on_change(self, db_path: Path, user_id: int, scenario_ledger: Ledger) -> None:
        """Should bump the revision for every effective sync."""
        replace_ledger(user_id, scenario_ledger.categories, scenario_ledger.transactions, db_path=db_path)
        smaller = scenario_ledger.remove_transaction("2")

        revision = replace_ledger(user_id, smaller.categories, smaller.transactions, db_path=db_path)

        assert revision == 2
        assert load_ledger(user_id, db_path).revision == 2

    def test_stale_revision_rejected(self, db_path: Path, user_id: int, scenario_ledger: Ledger) -> None:
        """Should refuse a sync from an outdated snapshot and write nothing."""
        stale = load_ledger(user_id, db_path)
        replace_ledger(
            user_id, scenario_ledger.categories, scenario_ledger.transactions, expected_revision=0, db_path=db_path
        )
        rows_before = dump_rows(db_path)

        with pytest.raises(StaleLedgerError) as excinfo:
            replace_ledger(
                user_id, stale.ledger.categories, (), expected_revision=stale.revision, db_path=db_path
            )

        assert excinfo.value.expected == 0
        assert excinfo.value.actual == 1
        assert dump_rows(db_path) == rows_before

    def test_failure_rolls_back_everything(self, db_path: Path, user_id: int, scenario_ledger: Ledger) -> None:
        """Should keep the prior state when any row fails."""
        replace_ledger(user_id, scenario_ledger.categories, scenario_ledger.transactions, db_path=db_path)
        rows_before = dump_rows(db_path)

        conn = sqlite3.connect(db_path)
        conn.execute(
            """
            CREATE TRIGGER reject_marker BEFORE INSERT ON transactions
            WHEN NEW.description = 'boom'
            BEGIN SELECT RAISE(ABORT, 'rejected'); END
            """
        )
        conn.commit()
        conn.close()

        bad = Transaction(TransactionId("9"), date(2024, 3, 3), Money(1), TransactionType.EXPENSE, "boom", CategoryId("1"))
        changed = scenario_ledger.remove_category("2").remove_transaction("0").add_transaction(bad)

        with pytest.raises(sqlite3.Error):
            replace_ledger(user_id, changed.categories, changed.transactions, db_path=db_path)

        assert dump_rows(db_path) == rows_before
        assert load_ledger(user_id, db_path).revision == 1

    def test_duplicate_ids_rejected(self, db_path: Path, user_id: int, scenario_ledger: Ledger) -> None:
        """Should refuse input collections that repeat an id."""
        doubled = scenario_ledger.transactions + scenario_ledger.transactions[:1]

        with pytest.raises(ValueError):
            replace_ledger(user_id, scenario_ledger.categories, doubled, db_path=db_path)
