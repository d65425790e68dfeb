"""Date utilities for budgetbook.

Pure functions for month-year tokens and month partitions. A month-year
token is "<month 1-12>-<year>" (e.g. "3-2024"); internally months are
zero-based (March is 2).
"""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True, order=True)
class Period:
    """A calendar month with a zero-based month index."""

    year: int
    month: int

    def contains(self, day: date) -> bool:
        """Check whether a date falls inside this month."""
        return day.month - 1 == self.month and day.year == self.year

    def to_token(self) -> str:
        """Format as a month-year token (e.g., "3-2024")."""
        return f"{self.month + 1}-{self.year}"

    @property
    def label(self) -> str:
        """Human-readable month (e.g., "March 2024")."""
        return date(self.year, self.month + 1, 1).strftime("%B %Y")


def period_of(day: date) -> Period:
    """Get the month partition a date belongs to."""
    return Period(year=day.year, month=day.month - 1)


def default_to_current_period(today: date | None = None) -> Period:
    """Fallback policy for empty or malformed month-year tokens.

    Args:
        today: Reference date. If None, uses today.

    Returns:
        Period for the current month.
    """
    return period_of(today or date.today())


def parse_month_year_strict(token: str) -> Period:
    """Parse a month-year token, rejecting anything malformed.

    Args:
        token: Month-year token ("<1-12>-<year>").

    Returns:
        Period with zero-based month.

    Raises:
        ValueError: If the token is not a valid month-year token.
    """
    month_str, sep, year_str = token.strip().partition("-")
    if not sep:
        raise ValueError(f"Invalid month-year token '{token}': expected M-YYYY")

    month = int(month_str)
    year = int(year_str)
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month-year token '{token}': month must be 1-12")
    if year < 1:
        raise ValueError(f"Invalid month-year token '{token}': year must be positive")

    return Period(year=year, month=month - 1)


def parse_month_year(token: str | None, today: date | None = None) -> Period:
    """Parse a month-year token, falling back to the current period.

    Empty and malformed tokens never raise; they resolve through
    default_to_current_period instead.

    Args:
        token: Month-year token, or None.
        today: Reference date for the fallback. If None, uses today.

    Returns:
        Period with zero-based month.
    """
    if not token:
        return default_to_current_period(today)
    try:
        return parse_month_year_strict(token)
    except ValueError:
        return default_to_current_period(today)
