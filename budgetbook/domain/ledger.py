"""The Ledger Model: one user's categories and transactions.

This module contains the functional core for ledger operations:
- No I/O operations (no database, no console, no files)
- No side effects: every mutator returns a new Ledger
- Pure aggregation over two ordered collections
- Easy to test

All monetary amounts are in cents (Money type).
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from budgetbook.dates import Period, parse_month_year
from budgetbook.domain.models import (
    INCOME_CATEGORY_ID,
    UNCATEGORIZED_CATEGORY_ID,
    Category,
    CategoryId,
    Money,
    Transaction,
    TransactionId,
    TransactionType,
)

if TYPE_CHECKING:
    from budgetbook.domain.statement import ExtractedTransaction


class LedgerError(ValueError):
    """Base class for rejected ledger operations."""


class DuplicateCategoryError(LedgerError):
    """A category with the same id or name already exists."""


class DuplicateTransactionError(LedgerError):
    """A transaction with the same id already exists."""


class UnknownCategoryError(LedgerError):
    """A transaction references a category that is not in the ledger."""


class ReservedCategoryError(LedgerError):
    """The Income and Uncategorized categories cannot be removed."""


class InvalidCategoryNameError(LedgerError):
    """A category name is empty after trimming."""


class CategoryTypeMismatchError(LedgerError):
    """Income must be filed under Income, and expenses anywhere else."""


def find_max_id(rows: Iterable[Category | Transaction]) -> int:
    """Find the highest numeric id in a collection.

    Args:
        rows: Categories or transactions.

    Returns:
        Highest numeric id, or -1 if there is none.
    """
    return max((int(row.id) for row in rows if row.id.isdigit()), default=-1)


def next_id(rows: Iterable[Category | Transaction]) -> str:
    """Get the id to assign to the next row of a collection.

    Ids are never reused: the result is always above every surviving id.
    """
    return str(find_max_id(rows) + 1)


@dataclass(frozen=True)
class Ledger:
    """Immutable aggregate of one user's categories and transactions."""

    categories: tuple[Category, ...] = ()
    transactions: tuple[Transaction, ...] = ()

    # Categories

    def get_category_by_id(self, category_id: str) -> Category | None:
        return next((c for c in self.categories if c.id == category_id), None)

    def with_categories(self, categories: Sequence[Category]) -> "Ledger":
        """Replace the full ordered category collection."""
        _check_unique_ids(categories, DuplicateCategoryError)
        return replace(self, categories=tuple(categories))

    def add_category(self, category: Category) -> "Ledger":
        """Append a category.

        Raises:
            DuplicateCategoryError: If the id or the name (case-insensitive) is taken.
        """
        if self.get_category_by_id(category.id) is not None:
            raise DuplicateCategoryError(f"Category id '{category.id}' already exists")
        if self._name_taken(category.name):
            raise DuplicateCategoryError(f"Category '{category.name}' already exists")
        return replace(self, categories=self.categories + (category,))

    def edit_category(
        self,
        category_id: str,
        name: str | None = None,
        color: str | None = None,
        budget: Money | None = None,
    ) -> "Ledger":
        """Update name, color or budget of a category. No-op if the id is absent.

        Raises:
            InvalidCategoryNameError: If the new name is blank.
            DuplicateCategoryError: If renaming onto another category's name.
        """
        current = self.get_category_by_id(category_id)
        if current is None:
            return self
        if name is not None:
            name = name.strip()
            if not name:
                raise InvalidCategoryNameError("Category name must not be empty")
            if self._name_taken(name, exclude=current.id):
                raise DuplicateCategoryError(f"Category '{name}' already exists")

        updated = replace(
            current,
            name=current.name if name is None else name,
            color=current.color if color is None else color,
            budget=current.budget if budget is None else budget,
        )
        return replace(
            self,
            categories=tuple(updated if c.id == category_id else c for c in self.categories),
        )

    def remove_category(self, category_id: str, reassign: bool = True) -> "Ledger":
        """Remove a category.

        Args:
            category_id: Category to remove.
            reassign: Move the category's transactions to Uncategorized in the
                same step. If False, they keep a dangling category id.

        Raises:
            ReservedCategoryError: If the category is Income or Uncategorized.
        """
        if category_id in (INCOME_CATEGORY_ID, UNCATEGORIZED_CATEGORY_ID):
            raise ReservedCategoryError(f"Category '{category_id}' is reserved")

        categories = tuple(c for c in self.categories if c.id != category_id)
        transactions = self.transactions
        if reassign:
            transactions = tuple(
                replace(t, category_id=UNCATEGORIZED_CATEGORY_ID) if t.category_id == category_id else t
                for t in transactions
            )
        return replace(self, categories=categories, transactions=transactions)

    def category_size(self) -> int:
        return len(self.categories)

    # Transactions

    def get_transaction_by_id(self, transaction_id: str) -> Transaction | None:
        return next((t for t in self.transactions if t.id == transaction_id), None)

    def with_transactions(self, transactions: Sequence[Transaction]) -> "Ledger":
        """Replace the full ordered transaction collection.

        Category references are not checked here; stored ledgers may hold
        transactions whose category was removed.
        """
        _check_unique_ids(transactions, DuplicateTransactionError)
        return replace(self, transactions=tuple(transactions))

    def add_transaction(self, transaction: Transaction) -> "Ledger":
        """Append a transaction.

        Raises:
            DuplicateTransactionError: If the id is taken.
            UnknownCategoryError: If the category does not exist.
            CategoryTypeMismatchError: If the category does not suit the type.
        """
        if self.get_transaction_by_id(transaction.id) is not None:
            raise DuplicateTransactionError(f"Transaction id '{transaction.id}' already exists")
        self._require_category(transaction.category_id)
        _check_category_type(transaction.type, transaction.category_id)
        return replace(self, transactions=self.transactions + (transaction,))

    def edit_transaction(
        self,
        transaction_id: str,
        description: str | None = None,
        category_id: str | None = None,
    ) -> "Ledger":
        """Update description or category of a transaction. No-op if the id is absent.

        Raises:
            UnknownCategoryError: If the new category does not exist.
            CategoryTypeMismatchError: If the new category does not suit the type.
        """
        current = self.get_transaction_by_id(transaction_id)
        if current is None:
            return self
        if category_id is not None:
            self._require_category(category_id)
            _check_category_type(current.type, category_id)

        updated = replace(
            current,
            description=current.description if description is None else description,
            category_id=current.category_id if category_id is None else CategoryId(category_id),
        )
        return replace(
            self,
            transactions=tuple(updated if t.id == transaction_id else t for t in self.transactions),
        )

    def remove_transaction(self, transaction_id: str) -> "Ledger":
        return replace(self, transactions=tuple(t for t in self.transactions if t.id != transaction_id))

    def transaction_size(self) -> int:
        return len(self.transactions)

    def next_category_id(self) -> CategoryId:
        return CategoryId(next_id(self.categories))

    def next_transaction_id(self) -> TransactionId:
        return TransactionId(next_id(self.transactions))

    def import_transactions(self, rows: Sequence["ExtractedTransaction"]) -> "Ledger":
        """Append statement rows in one step, assigning ids and categories."""
        from budgetbook.domain.statement import resolve_extracted_transactions

        resolved = resolve_extracted_transactions(self, rows)
        return replace(self, transactions=self.transactions + resolved)

    # Aggregation

    def calculate_income(self, category_id: str, month: int, year: int) -> Money:
        """Sum income for a category in a zero-based month of a year."""
        return self._sum(TransactionType.INCOME, category_id, Period(year=year, month=month))

    def calculate_expense(self, category_id: str, month: int, year: int) -> Money:
        """Sum expenses for a category in a zero-based month of a year."""
        return self._sum(TransactionType.EXPENSE, category_id, Period(year=year, month=month))

    def calculate_remaining_budget(self, category_id: str, month: int, year: int) -> Money:
        """Budget minus expenses; 0 if the category does not exist."""
        category = self.get_category_by_id(category_id)
        if category is None:
            return Money(0)
        return Money(category.budget - self.calculate_expense(category_id, month, year))

    def calculate_usage(self, category_id: str, month: int, year: int) -> float:
        """Percentage of the budget spent; 0 if there is no budget."""
        category = self.get_category_by_id(category_id)
        if category is None or category.budget == 0:
            return 0.0
        return self.calculate_expense(category_id, month, year) / category.budget * 100

    def calculate_total_income(self, month_year: str | Period | None) -> Money:
        period = _resolve_period(month_year)
        return Money(sum(self.calculate_income(c.id, period.month, period.year) for c in self.categories))

    def calculate_total_expense(self, month_year: str | Period | None) -> Money:
        period = _resolve_period(month_year)
        return Money(sum(self.calculate_expense(c.id, period.month, period.year) for c in self.categories))

    def calculate_total_remaining_budget(self, month_year: str | Period | None) -> Money:
        """Sum remaining budgets, leaving out Uncategorized (it has no budget)."""
        period = _resolve_period(month_year)
        return Money(
            sum(
                self.calculate_remaining_budget(c.id, period.month, period.year)
                for c in self.categories
                if c.id != UNCATEGORIZED_CATEGORY_ID
            )
        )

    def calculate_saving_rate(self, month_year: str | Period | None) -> float:
        """Share of income not spent, as a percentage; 0 without income."""
        total_income = self.calculate_total_income(month_year)
        total_expense = self.calculate_total_expense(month_year)
        if total_income == 0:
            return 0.0
        return (total_income - total_expense) / total_income * 100

    def _sum(self, kind: TransactionType, category_id: str, period: Period) -> Money:
        return Money(
            sum(
                t.amount
                for t in self.transactions
                if t.type is kind and t.category_id == category_id and period.contains(t.date)
            )
        )

    def _name_taken(self, name: str, exclude: str | None = None) -> bool:
        wanted = name.strip().lower()
        return any(c.name.strip().lower() == wanted for c in self.categories if c.id != exclude)

    def _require_category(self, category_id: str) -> None:
        if self.get_category_by_id(category_id) is None:
            raise UnknownCategoryError(f"Category '{category_id}' does not exist")


def _resolve_period(month_year: str | Period | None) -> Period:
    if isinstance(month_year, Period):
        return month_year
    return parse_month_year(month_year)


def _check_category_type(kind: TransactionType, category_id: str) -> None:
    if kind is TransactionType.INCOME and category_id != INCOME_CATEGORY_ID:
        raise CategoryTypeMismatchError("Income must be filed under Income")
    if kind is TransactionType.EXPENSE and category_id == INCOME_CATEGORY_ID:
        raise CategoryTypeMismatchError("Expenses cannot be filed under Income")


def _check_unique_ids(rows: Sequence[Category | Transaction], error: type[LedgerError]) -> None:
    seen: set[str] = set()
    for row in rows:
        if row.id in seen:
            raise error(f"Duplicate id '{row.id}'")
        seen.add(row.id)
