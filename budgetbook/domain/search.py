"""Pure functions for searching and sorting transaction lists.

Query syntax (case-insensitive, surrounding whitespace ignored):
- plain text: substring of the description
- @cat:<name>: category name contains <name>
- @type:<income|expense>: exact transaction type
- @date:<M-YYYY>: transaction falls in that month

The description clause is always evaluated, so "@cat:food" also matches a
description that literally contains "@cat:food".
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from budgetbook.dates import parse_month_year
from budgetbook.domain.ledger import Ledger
from budgetbook.domain.models import Transaction

CATEGORY_PREFIX = "@cat:"
TYPE_PREFIX = "@type:"
DATE_PREFIX = "@date:"


class SortField(str, Enum):
    """Transaction list columns that can be sorted."""

    DATE = "date"
    DESCRIPTION = "description"
    CATEGORY = "category"
    TYPE = "type"
    AMOUNT = "amount"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortState:
    """Immutable sort selection for a transaction list."""

    field: SortField = SortField.DATE
    direction: SortDirection = SortDirection.DESC

    def toggle(self, field: SortField) -> "SortState":
        """Select a column: flips direction on the same field, else starts ascending."""
        if field is self.field:
            flipped = SortDirection.DESC if self.direction is SortDirection.ASC else SortDirection.ASC
            return SortState(field=field, direction=flipped)
        return SortState(field=field, direction=SortDirection.ASC)


def normalize_query(query: str | None) -> str:
    return (query or "").lower().strip()


def matches_query(transaction: Transaction, query: str, ledger: Ledger) -> bool:
    """Check if a transaction matches a normalized search query.

    Args:
        transaction: Transaction to test.
        query: Lowercase, trimmed query (see normalize_query).
        ledger: Ledger used to resolve category names.

    Returns:
        True if any clause matches.
    """
    if query in transaction.description.lower():
        return True

    if query.startswith(CATEGORY_PREFIX):
        wanted = query[len(CATEGORY_PREFIX) :].strip()
        category = ledger.get_category_by_id(transaction.category_id)
        if category is not None and wanted in category.name.lower():
            return True

    if query.startswith(TYPE_PREFIX):
        wanted = query[len(TYPE_PREFIX) :].strip()
        if transaction.type.value == wanted:
            return True

    if query.startswith(DATE_PREFIX):
        period = parse_month_year(query[len(DATE_PREFIX) :].strip())
        if period.contains(transaction.date):
            return True

    return False


def search_transactions(ledger: Ledger, query: str | None) -> list[Transaction]:
    """Filter the ledger's transactions by a search query.

    Args:
        ledger: Ledger to search.
        query: Raw query text. Empty matches everything.

    Returns:
        Matching transactions in ledger order.
    """
    normalized = normalize_query(query)
    if not normalized:
        return list(ledger.transactions)
    return [t for t in ledger.transactions if matches_query(t, normalized, ledger)]


def _sort_key(field: SortField) -> Any:
    if field is SortField.DATE:
        return lambda t: t.date
    if field is SortField.DESCRIPTION:
        return lambda t: t.description.lower()
    if field is SortField.CATEGORY:
        return lambda t: t.category_id.lower()
    if field is SortField.TYPE:
        return lambda t: t.type.value
    return lambda t: t.amount


def sort_transactions(transactions: Sequence[Transaction], state: SortState) -> list[Transaction]:
    """Stable sort of transactions by the selected column.

    Ties keep their input order in both directions.
    """
    return sorted(
        transactions,
        key=_sort_key(state.field),
        reverse=state.direction is SortDirection.DESC,
    )
