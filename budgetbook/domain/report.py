"""Pure functions for report calculations and aggregations.

This module contains the functional core for reporting operations:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

All monetary amounts are in cents (Money type).
"""

from collections import defaultdict
from dataclasses import dataclass

from budgetbook.dates import Period, parse_month_year, period_of
from budgetbook.domain.ledger import Ledger
from budgetbook.domain.models import (
    INCOME_CATEGORY_ID,
    UNCATEGORIZED_CATEGORY_ID,
    CategoryId,
    Money,
    TransactionType,
)


@dataclass(frozen=True)
class MonthSummary:
    """Immutable dashboard totals for a month."""

    period: Period
    total_income: Money
    total_expense: Money
    total_remaining: Money
    saving_rate: float


@dataclass(frozen=True)
class CategoryStatus:
    """Immutable spending status for a single category."""

    category_id: CategoryId
    name: str
    color: str
    budget: Money
    spent: Money
    remaining: Money
    usage: float

    @property
    def is_uncategorized(self) -> bool:
        return self.category_id == UNCATEGORIZED_CATEGORY_ID


@dataclass(frozen=True)
class OverBudget:
    """Immutable over-budget entry."""

    name: str
    spent: Money
    budget: Money


@dataclass(frozen=True)
class BudgetOverview:
    """Immutable success/failure split of categories for a month."""

    successes: list[str]
    failures: list[OverBudget]


@dataclass(frozen=True)
class MonthlyTrend:
    """Immutable income/expense totals for one calendar month."""

    period: Period
    income: Money
    expenses: Money

    @property
    def savings(self) -> Money:
        return Money(self.income - self.expenses)


def summarize_month(ledger: Ledger, month_year: str | Period | None) -> MonthSummary:
    """Compute dashboard totals for a month.

    Args:
        ledger: Ledger to summarize.
        month_year: Month-year token or Period. Malformed tokens mean the current month.

    Returns:
        MonthSummary with income, expense, remaining budget and saving rate.
    """
    period = month_year if isinstance(month_year, Period) else parse_month_year(month_year)
    return MonthSummary(
        period=period,
        total_income=ledger.calculate_total_income(period),
        total_expense=ledger.calculate_total_expense(period),
        total_remaining=ledger.calculate_total_remaining_budget(period),
        saving_rate=ledger.calculate_saving_rate(period),
    )


def category_breakdown(ledger: Ledger, period: Period) -> list[CategoryStatus]:
    """Compute spending status for every non-Income category.

    Args:
        ledger: Ledger to report on.
        period: Month to report.

    Returns:
        List of CategoryStatus in ledger order.
    """
    return [
        CategoryStatus(
            category_id=c.id,
            name=c.name,
            color=c.color,
            budget=c.budget,
            spent=ledger.calculate_expense(c.id, period.month, period.year),
            remaining=ledger.calculate_remaining_budget(c.id, period.month, period.year),
            usage=ledger.calculate_usage(c.id, period.month, period.year),
        )
        for c in ledger.categories
        if c.id != INCOME_CATEGORY_ID
    ]


def budget_overview(ledger: Ledger, period: Period) -> BudgetOverview:
    """Split categories into within-budget and over-budget for a month.

    Uncategorized has no budget and always counts as a success.
    """
    successes: list[str] = []
    failures: list[OverBudget] = []

    for status in category_breakdown(ledger, period):
        if status.is_uncategorized or status.spent <= status.budget:
            successes.append(status.name)
        else:
            failures.append(OverBudget(name=status.name, spent=status.spent, budget=status.budget))

    return BudgetOverview(successes=successes, failures=failures)


def monthly_trends(ledger: Ledger, limit: int = 6) -> list[MonthlyTrend]:
    """Compute income and expenses per calendar month.

    Args:
        ledger: Ledger to report on.
        limit: Number of most recent months to keep.

    Returns:
        Chronological list of MonthlyTrend, at most `limit` long.
    """
    income: dict[Period, int] = defaultdict(int)
    expenses: dict[Period, int] = defaultdict(int)

    for t in ledger.transactions:
        period = period_of(t.date)
        if t.type is TransactionType.INCOME:
            income[period] += t.amount
        else:
            expenses[period] += t.amount

    periods = sorted(set(income) | set(expenses))
    if limit > 0:
        periods = periods[-limit:]
    return [MonthlyTrend(period=p, income=Money(income[p]), expenses=Money(expenses[p])) for p in periods]


def calculate_histogram_bar_length(
    amount: Money,
    max_amount: Money,
    bar_width: int,
) -> int:
    """Calculate histogram bar length.

    Args:
        amount: Amount to display.
        max_amount: Maximum amount in dataset.
        bar_width: Maximum bar width in characters.

    Returns:
        Bar length in characters.
    """
    if max_amount <= 0:
        return 0
    return int((abs(amount) / max_amount) * bar_width)
