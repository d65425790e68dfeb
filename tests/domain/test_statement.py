"""Tests for budgetbook.domain.statement pure functions."""

from dataclasses import replace
from datetime import date

from budgetbook.domain.ledger import Ledger
from budgetbook.domain.models import INCOME_CATEGORY_ID, UNCATEGORIZED_CATEGORY_ID, Money, TransactionType
from budgetbook.domain.statement import ExtractedTransaction, resolve_category_id, resolve_extracted_transactions


def row(kind: str, category: str | None, amount: int = 1000) -> ExtractedTransaction:
    return ExtractedTransaction(
        date=date(2024, 3, 15),
        description="Imported",
        amount=Money(amount),
        type=kind,
        category_name=category,
    )


class TestResolveCategoryId:
    """Tests for resolve_category_id."""

    def test_income_forced_to_income_category(self, scenario_ledger: Ledger) -> None:
        """Should ignore the guessed name for income rows."""
        assert resolve_category_id(scenario_ledger, row("income", "Groceries")) == INCOME_CATEGORY_ID
        assert resolve_category_id(scenario_ledger, row("INCOME", None)) == INCOME_CATEGORY_ID

    def test_expense_exact_name_match_case_insensitive(self, scenario_ledger: Ledger) -> None:
        """Should match the category name ignoring case."""
        assert resolve_category_id(scenario_ledger, row("expense", "groceries")) == "2"

    def test_expense_guessed_as_income_goes_uncategorized(self, scenario_ledger: Ledger) -> None:
        """Should never file an expense under Income."""
        assert resolve_category_id(scenario_ledger, row("expense", "Income")) == UNCATEGORIZED_CATEGORY_ID

    def test_stored_name_padding_ignored(self, scenario_ledger: Ledger) -> None:
        """Should trim both the guess and the stored name."""
        ledger = scenario_ledger.with_categories(
            [*scenario_ledger.categories[:2], replace(scenario_ledger.categories[2], name=" Groceries ")]
        )

        assert resolve_category_id(ledger, row("expense", "groceries ")) == "2"

    def test_expense_partial_name_goes_uncategorized(self, scenario_ledger: Ledger) -> None:
        """Should require an exact name match."""
        assert resolve_category_id(scenario_ledger, row("expense", "Grocer")) == UNCATEGORIZED_CATEGORY_ID

    def test_expense_without_guess_goes_uncategorized(self, scenario_ledger: Ledger) -> None:
        """Should fall back to Uncategorized."""
        assert resolve_category_id(scenario_ledger, row("expense", None)) == UNCATEGORIZED_CATEGORY_ID


class TestResolveExtractedTransactions:
    """Tests for resolve_extracted_transactions and Ledger.import_transactions."""

    def test_sequential_ids_from_current_max(self, scenario_ledger: Ledger) -> None:
        """Should continue numbering after the highest existing id."""
        resolved = resolve_extracted_transactions(
            scenario_ledger, [row("expense", "Groceries"), row("income", None), row("expense", "Rent")]
        )

        assert [t.id for t in resolved] == ["3", "4", "5"]
        assert [t.category_id for t in resolved] == ["2", "0", "1"]
        assert [t.type for t in resolved] == [TransactionType.EXPENSE, TransactionType.INCOME, TransactionType.EXPENSE]

    def test_ids_start_at_zero_for_empty_ledger(self) -> None:
        """Should number from "0" when there are no transactions."""
        resolved = resolve_extracted_transactions(Ledger(), [row("expense", None)])

        assert resolved[0].id == "0"

    def test_unknown_type_becomes_expense(self, scenario_ledger: Ledger) -> None:
        """Should treat anything other than income as an expense."""
        resolved = resolve_extracted_transactions(scenario_ledger, [row("debit", None)])

        assert resolved[0].type is TransactionType.EXPENSE

    def test_negative_amount_made_positive(self, scenario_ledger: Ledger) -> None:
        """Should store the absolute amount."""
        resolved = resolve_extracted_transactions(scenario_ledger, [row("expense", None, amount=-2599)])

        assert resolved[0].amount == Money(2599)

    def test_import_appends_all_rows(self, scenario_ledger: Ledger) -> None:
        """Should add every resolved row in one new ledger."""
        imported = scenario_ledger.import_transactions([row("expense", "Groceries"), row("income", None)])

        assert scenario_ledger.transaction_size() == 3
        assert imported.transaction_size() == 5
        assert imported.calculate_expense("2", 2, 2024) == Money(6000)
        assert imported.calculate_total_income("3-2024") == Money(101000)
