"""Shared fixtures for budgetbook tests."""

from datetime import date, datetime

import pytest

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

CREATED = datetime(2024, 1, 1, 9, 30)


def make_transaction(
    txn_id: str,
    day: date,
    amount: int,
    kind: TransactionType,
    category_id: str,
    description: str = "",
) -> Transaction:
    return Transaction(
        id=TransactionId(txn_id),
        date=day,
        amount=Money(amount),
        type=kind,
        description=description,
        category_id=CategoryId(category_id),
    )


@pytest.fixture
def groceries() -> Category:
    return Category(CategoryId("2"), "Groceries", "#22c55e", Money(20000), CREATED)


@pytest.fixture
def scenario_ledger(groceries: Category) -> Ledger:
    """Income, Uncategorized and Groceries ($200) with March 2024 activity.

    - $1000 salary (income)
    - $50 groceries
    - $30 uncategorized
    """
    return Ledger(
        categories=(*default_categories(CREATED), groceries),
        transactions=(
            make_transaction("0", date(2024, 3, 1), 100000, TransactionType.INCOME, "0", "Salary"),
            make_transaction("1", date(2024, 3, 5), 5000, TransactionType.EXPENSE, "2", "Corner Shop"),
            make_transaction("2", date(2024, 3, 9), 3000, TransactionType.EXPENSE, "1", "Parking"),
        ),
    )
