"""Pure functions for turning extracted statement rows into transactions.

The extraction itself (document text, language model) happens in
budgetbook.integrations. This module only assigns ids and resolves
category names against the ledger.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from budgetbook.domain.ledger import Ledger, find_max_id
from budgetbook.domain.models import (
    INCOME_CATEGORY_ID,
    UNCATEGORIZED_CATEGORY_ID,
    CategoryId,
    Money,
    Transaction,
    TransactionId,
    TransactionType,
)


@dataclass(frozen=True)
class ExtractedTransaction:
    """One statement row as returned by an extractor."""

    date: date
    description: str
    amount: Money
    type: str
    category_name: str | None = None


def resolve_category_id(ledger: Ledger, row: ExtractedTransaction) -> CategoryId:
    """Pick the category for an extracted row.

    Income rows always go to Income. Other rows use the non-Income category
    whose name equals the guess (case-insensitive), else Uncategorized.
    """
    if row.type.strip().lower() == TransactionType.INCOME.value:
        return INCOME_CATEGORY_ID

    guess = (row.category_name or "").strip().lower()
    for category in ledger.categories:
        if category.id != INCOME_CATEGORY_ID and category.name.strip().lower() == guess:
            return category.id
    return UNCATEGORIZED_CATEGORY_ID


def resolve_extracted_transactions(
    ledger: Ledger,
    rows: Sequence[ExtractedTransaction],
) -> tuple[Transaction, ...]:
    """Convert extracted rows into ledger transactions.

    Args:
        ledger: Ledger the rows will be added to.
        rows: Extracted statement rows.

    Returns:
        Transactions with sequential ids starting above the current maximum.

    Raises:
        ValueError: If a row has a zero amount.
    """
    start = find_max_id(ledger.transactions) + 1
    resolved: list[Transaction] = []

    for offset, row in enumerate(rows):
        is_income = row.type.strip().lower() == TransactionType.INCOME.value
        resolved.append(
            Transaction(
                id=TransactionId(str(start + offset)),
                date=row.date,
                amount=Money(abs(row.amount)),
                type=TransactionType.INCOME if is_income else TransactionType.EXPENSE,
                description=row.description,
                category_id=resolve_category_id(ledger, row),
            )
        )

    return tuple(resolved)
