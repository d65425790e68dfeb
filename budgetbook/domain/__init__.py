"""Domain models and types for budgetbook.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

from budgetbook.domain.ledger import (
    CategoryTypeMismatchError,
    DuplicateCategoryError,
    DuplicateTransactionError,
    InvalidCategoryNameError,
    Ledger,
    LedgerError,
    ReservedCategoryError,
    UnknownCategoryError,
    find_max_id,
    next_id,
)
from budgetbook.domain.models import (
    INCOME_CATEGORY_ID,
    UNCATEGORIZED_CATEGORY_ID,
    Category,
    CategoryId,
    Money,
    Transaction,
    TransactionId,
    TransactionType,
    default_categories,
)

__all__ = [
    "Category",
    "CategoryTypeMismatchError",
    "CategoryId",
    "DuplicateCategoryError",
    "DuplicateTransactionError",
    "INCOME_CATEGORY_ID",
    "InvalidCategoryNameError",
    "Ledger",
    "LedgerError",
    "Money",
    "ReservedCategoryError",
    "Transaction",
    "TransactionId",
    "TransactionType",
    "UNCATEGORIZED_CATEGORY_ID",
    "UnknownCategoryError",
    "default_categories",
    "find_max_id",
    "next_id",
]
