"""Domain type definitions for budgetbook.

These NewTypes and records provide semantic clarity and help with type checking:
- Money: Amount in cents (minor units)
- CategoryId / TransactionId: Decimal-string identifiers, unique per ledger
- Category / Transaction: Immutable ledger rows
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import NewType

# Money amounts are stored as cents (minor units) to avoid floating point errors
Money = NewType("Money", int)

# Identifiers are decimal strings of integers (e.g., "0", "17")
CategoryId = NewType("CategoryId", str)
TransactionId = NewType("TransactionId", str)

# Reserved categories, seeded for every new ledger
INCOME_CATEGORY_ID = CategoryId("0")
UNCATEGORIZED_CATEGORY_ID = CategoryId("1")
RESERVED_CATEGORY_IDS = frozenset({INCOME_CATEGORY_ID, UNCATEGORIZED_CATEGORY_ID})

INCOME_CATEGORY_NAME = "Income"
UNCATEGORIZED_CATEGORY_NAME = "Uncategorized"


class TransactionType(str, Enum):
    """Direction of a transaction. The sign never lives in the amount."""

    INCOME = "income"
    EXPENSE = "expense"


@dataclass(frozen=True)
class Category:
    """Immutable spending category with a monthly budget."""

    id: CategoryId
    name: str
    color: str
    budget: Money = Money(0)
    created_at: datetime = field(default_factory=datetime.now, compare=False)

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("Category name must not be empty")
        if self.budget < 0:
            raise ValueError("Category budget must not be negative")

    @property
    def is_reserved(self) -> bool:
        return self.id in RESERVED_CATEGORY_IDS


@dataclass(frozen=True)
class Transaction:
    """Immutable income or expense record."""

    id: TransactionId
    date: date
    amount: Money
    type: TransactionType
    description: str
    category_id: CategoryId

    def __post_init__(self) -> None:
        if self.amount <= 0:
            raise ValueError("Transaction amount must be positive")
        # Accept plain strings ("income") from storage and imports
        object.__setattr__(self, "type", TransactionType(self.type))


def default_categories(created_at: datetime | None = None) -> tuple[Category, Category]:
    """Build the two reserved categories seeded into an empty ledger.

    Args:
        created_at: Creation timestamp. If None, uses now.

    Returns:
        Tuple of (income, uncategorized) categories.
    """
    if created_at is None:
        created_at = datetime.now()
    return (
        Category(INCOME_CATEGORY_ID, INCOME_CATEGORY_NAME, "#ffffff", Money(0), created_at),
        Category(UNCATEGORIZED_CATEGORY_ID, UNCATEGORIZED_CATEGORY_NAME, "#c7c7c7", Money(0), created_at),
    )
