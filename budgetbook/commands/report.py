"""Summary and analytics commands for viewing budget data."""

import sqlite3
import sys

from rich.console import Console
from rich.table import Table

from budgetbook.commands.common import format_money, open_ledger, require_session, resolve_month
from budgetbook.domain.models import Money
from budgetbook.domain.report import (
    CategoryStatus,
    budget_overview,
    calculate_histogram_bar_length,
    category_breakdown,
    monthly_trends,
    summarize_month,
)

console = Console()


def format_usage_with_color(percentage: float) -> str:
    """Format budget usage with color based on percentage.

    Args:
        percentage: Budget usage percentage.

    Returns:
        Colored string for usage display.
    """
    usage_text = f"{percentage:.0f}%"
    if percentage > 100:
        return f"[red]{usage_text}[/red]"
    elif percentage > 90:
        return f"[yellow]{usage_text}[/yellow]"
    else:
        return f"[green]{usage_text}[/green]"


def render_category_row(table: Table, status: CategoryStatus) -> None:
    """Add one category status row to the summary table."""
    if status.is_uncategorized:
        table.add_row(status.name, format_money(status.spent), "[dim]-[/dim]", "[dim]-[/dim]", "[dim]-[/dim]")
        return

    remaining = format_money(status.remaining)
    if status.remaining < 0:
        remaining = f"[red]{remaining}[/red]"
    table.add_row(
        status.name,
        format_money(status.spent),
        format_money(status.budget),
        remaining,
        format_usage_with_color(status.usage),
    )


def summary_command(month: str | None = None) -> None:
    """Show income, expenses, remaining budget and saving rate for a month."""
    user_id = require_session()
    period = resolve_month(month)

    try:
        ledger = open_ledger(user_id).ledger
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    summary = summarize_month(ledger, period)

    console.print(f"\n[bold cyan]{period.label}[/bold cyan]\n")
    console.print(f"  Total income:      [green]{format_money(summary.total_income)}[/green]")
    console.print(f"  Total expenses:    [red]{format_money(summary.total_expense)}[/red]")
    console.print(f"  Remaining budget:  {format_money(summary.total_remaining)}")
    console.print(f"  Saving rate:       {summary.saving_rate:.1f}%\n")

    statuses = category_breakdown(ledger, period)
    if ledger.category_size() == 2 and summary.total_expense == 0:
        console.print("[dim]No budget categories or spending yet[/dim]")
        return

    table = Table(title="Budgets")
    table.add_column("Category", style="cyan")
    table.add_column("Spent", justify="right")
    table.add_column("Budget", justify="right")
    table.add_column("Remaining", justify="right")
    table.add_column("Usage", justify="right")
    for status in statuses:
        render_category_row(table, status)
    console.print(table)


def analytics_command(month: str | None = None, histogram: bool = True) -> None:
    """Show budget successes/failures for a month and recent monthly trends."""
    user_id = require_session()
    period = resolve_month(month)

    try:
        ledger = open_ledger(user_id).ledger
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)

    overview = budget_overview(ledger, period)

    console.print(f"\n[bold cyan]Budget Status Overview - {period.label}[/bold cyan]\n")
    console.print(f"[green]Success ({len(overview.successes)})[/green]")
    for name in overview.successes:
        console.print(f"  • {name}")
    console.print(f"\n[red]Failures ({len(overview.failures)})[/red]")
    for failure in overview.failures:
        console.print(f"  • {failure.name}: {format_money(failure.spent)} of {format_money(failure.budget)}")

    trends = monthly_trends(ledger)
    if not trends:
        console.print("\n[yellow]No transactions yet[/yellow]")
        return

    table = Table(title="Monthly Trends")
    table.add_column("Month", style="cyan")
    table.add_column("Income", justify="right", style="green")
    table.add_column("Expenses", justify="right", style="red")
    table.add_column("Savings", justify="right")
    if histogram:
        table.add_column("")

    max_amount = Money(max(max(t.income, t.expenses) for t in trends))
    bar_width = 30
    for trend in trends:
        row = [
            trend.period.label,
            format_money(trend.income),
            format_money(trend.expenses),
            format_money(trend.savings),
        ]
        if histogram:
            income_bar = "█" * calculate_histogram_bar_length(trend.income, max_amount, bar_width)
            expense_bar = "█" * calculate_histogram_bar_length(trend.expenses, max_amount, bar_width)
            row.append(f"[green]{income_bar}[/green]\n[red]{expense_bar}[/red]")
        table.add_row(*row)

    console.print()
    console.print(table)
