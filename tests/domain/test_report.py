"""Tests for budgetbook.domain.report pure functions."""

from datetime import date

from budgetbook.dates import Period
from budgetbook.domain.ledger import Ledger
from budgetbook.domain.models import CategoryId, Money, Transaction, TransactionId, TransactionType
from budgetbook.domain.report import (
    budget_overview,
    calculate_histogram_bar_length,
    category_breakdown,
    monthly_trends,
    summarize_month,
)

MARCH_2024 = Period(year=2024, month=2)


def expense(txn_id: str, day: date, amount: int, category_id: str) -> Transaction:
    return Transaction(
        TransactionId(txn_id), day, Money(amount), TransactionType.EXPENSE, "spend", CategoryId(category_id)
    )


class TestSummarizeMonth:
    """Tests for summarize_month."""

    def test_scenario_summary(self, scenario_ledger: Ledger) -> None:
        """Should bundle the four dashboard figures."""
        summary = summarize_month(scenario_ledger, "3-2024")

        assert summary.period == MARCH_2024
        assert summary.total_income == Money(100000)
        assert summary.total_expense == Money(8000)
        assert summary.total_remaining == Money(15000)
        assert summary.saving_rate == 92.0

    def test_accepts_period(self, scenario_ledger: Ledger) -> None:
        """Should accept a Period directly."""
        assert summarize_month(scenario_ledger, MARCH_2024).total_expense == Money(8000)


class TestCategoryBreakdown:
    """Tests for category_breakdown."""

    def test_excludes_income_category(self, scenario_ledger: Ledger) -> None:
        """Should list every category except Income."""
        statuses = category_breakdown(scenario_ledger, MARCH_2024)

        assert [s.name for s in statuses] == ["Uncategorized", "Groceries"]

    def test_status_values(self, scenario_ledger: Ledger) -> None:
        """Should report spent, remaining and usage."""
        groceries = category_breakdown(scenario_ledger, MARCH_2024)[1]

        assert groceries.spent == Money(5000)
        assert groceries.budget == Money(20000)
        assert groceries.remaining == Money(15000)
        assert groceries.usage == 25.0
        assert not groceries.is_uncategorized


class TestBudgetOverview:
    """Tests for budget_overview."""

    def test_all_within_budget(self, scenario_ledger: Ledger) -> None:
        """Should count Uncategorized as a success even with spending."""
        overview = budget_overview(scenario_ledger, MARCH_2024)

        assert overview.successes == ["Uncategorized", "Groceries"]
        assert overview.failures == []

    def test_over_budget_category_fails(self, scenario_ledger: Ledger) -> None:
        """Should list categories that spent more than their budget."""
        ledger = scenario_ledger.add_transaction(expense("3", date(2024, 3, 20), 16000, "2"))
        overview = budget_overview(ledger, MARCH_2024)

        assert overview.successes == ["Uncategorized"]
        assert len(overview.failures) == 1
        assert overview.failures[0].name == "Groceries"
        assert overview.failures[0].spent == Money(21000)
        assert overview.failures[0].budget == Money(20000)

    def test_exactly_on_budget_is_success(self, scenario_ledger: Ledger) -> None:
        """Should treat spending equal to the budget as a success."""
        ledger = scenario_ledger.add_transaction(expense("3", date(2024, 3, 20), 15000, "2"))

        assert "Groceries" in budget_overview(ledger, MARCH_2024).successes


class TestMonthlyTrends:
    """Tests for monthly_trends."""

    def test_groups_by_month(self, scenario_ledger: Ledger) -> None:
        """Should sum income and expenses per month."""
        ledger = scenario_ledger.add_transaction(expense("3", date(2024, 4, 2), 2500, "2"))
        trends = monthly_trends(ledger)

        assert [t.period for t in trends] == [MARCH_2024, Period(year=2024, month=3)]
        assert trends[0].income == Money(100000)
        assert trends[0].expenses == Money(8000)
        assert trends[0].savings == Money(92000)
        assert trends[1].income == 0
        assert trends[1].savings == Money(-2500)

    def test_keeps_most_recent_months_chronologically(self, scenario_ledger: Ledger) -> None:
        """Should keep only the last `limit` months across year boundaries."""
        ledger = scenario_ledger
        for offset, day in enumerate([date(2023, 11, 5), date(2023, 12, 5), date(2024, 1, 5), date(2024, 2, 5)]):
            ledger = ledger.add_transaction(expense(str(10 + offset), day, 100, "1"))

        trends = monthly_trends(ledger, limit=3)

        assert [t.period for t in trends] == [Period(2024, 0), Period(2024, 1), MARCH_2024]

    def test_empty_ledger(self) -> None:
        """Should return no trends."""
        assert monthly_trends(Ledger()) == []


class TestHistogramBarLength:
    """Tests for calculate_histogram_bar_length."""

    def test_full_and_half_bars(self) -> None:
        assert calculate_histogram_bar_length(Money(100), Money(100), 30) == 30
        assert calculate_histogram_bar_length(Money(50), Money(100), 30) == 15

    def test_zero_max(self) -> None:
        assert calculate_histogram_bar_length(Money(50), Money(0), 30) == 0
