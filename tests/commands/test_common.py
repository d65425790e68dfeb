"""Tests for budgetbook.commands.common input parsing."""

from datetime import date

import pytest

from budgetbook.commands.common import format_money, parse_date_input, parse_money
from budgetbook.domain.models import Money


class TestParseMoney:
    """Tests for parse_money."""

    def test_dollars_to_cents(self) -> None:
        assert parse_money("12.34") == Money(1234)
        assert parse_money("$1,000") == Money(100000)

    def test_rejects_negative_and_garbage(self) -> None:
        assert parse_money("-5") is None
        assert parse_money("abc") is None

    @pytest.mark.parametrize("raw", ["inf", "Infinity", "1e400", "nan"])
    def test_rejects_non_finite(self, raw: str) -> None:
        """Should return None rather than overflow on infinite input."""
        assert parse_money(raw) is None


class TestFormatMoney:
    def test_positive_and_negative(self) -> None:
        assert format_money(Money(123456)) == "$1,234.56"
        assert format_money(Money(-1200)) == "-$12.00"


class TestParseDateInput:
    def test_day_first(self) -> None:
        assert parse_date_input("05/03/2024") == date(2024, 3, 5)

    def test_invalid(self) -> None:
        with pytest.raises(ValueError):
            parse_date_input("not a date")
