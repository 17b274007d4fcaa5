"""Tests for transaction analysis tools."""

from datetime import date
from decimal import Decimal

import pytest

from installments import generate_installments
from models.summary import UNCATEGORIZED
from models.transaction import TransactionNature, TransactionType
from tools.transactions import (
    chain_progress,
    expense_breakdown,
    get_period_transactions,
    summarize_period,
    summarize_periods,
    upcoming_dues,
)
from tests.helpers import make_transaction


@pytest.fixture
def january():
    """Income of 5000.00 with Food 200.00 and Rent 800.00 in January 2024."""
    return [
        make_transaction(
            "salary", 500000, date(2024, 1, 5), type=TransactionType.INCOME,
            nature=TransactionNature.SALARY, description="Salary",
        ),
        make_transaction("food", 20000, date(2024, 1, 10), category="Food"),
        make_transaction(
            "rent", 80000, date(2024, 1, 1), category="Rent",
            nature=TransactionNature.FIXED, description="Rent",
        ),
        make_transaction("feb", 99900, date(2024, 2, 1), category="Food"),
    ]


class TestGetPeriodTransactions:
    """Tests for get_period_transactions."""

    def test_filters_by_month(self, january):
        assert {t.id for t in get_period_transactions(january, "2024-01")} == {
            "salary",
            "food",
            "rent",
        }


class TestSummarizePeriod:
    """Tests for summarize_period."""

    def test_totals_and_shares(self, january):
        summary = summarize_period(january, "2024-01")

        assert summary.period_label == "January 2024"
        assert summary.total_income == Decimal("5000.00")
        assert summary.total_expense == Decimal("1000.00")
        assert summary.balance == Decimal("4000.00")
        assert [(c.category, c.amount) for c in summary.categories] == [
            ("Rent", Decimal("800.00")),
            ("Food", Decimal("200.00")),
        ]
        assert summary.categories[0].percent_of_expenses == pytest.approx(0.8)
        assert summary.categories[1].percent_of_expenses == pytest.approx(0.2)

    def test_loan_payments_count_as_expenses(self):
        transactions = [
            make_transaction("a", 10000, type=TransactionType.LOAN_PAYMENT, category="Bills"),
            make_transaction("b", 5000, type=TransactionType.LOAN),
            make_transaction("c", 7000, type=TransactionType.TRANSFER),
        ]

        summary = summarize_period(transactions, "2024-01")

        assert summary.total_expense == Decimal("100.00")
        assert summary.total_income == Decimal("0.00")

    def test_uncategorized_bucket(self):
        summary = summarize_period([make_transaction(category=None)], "2024-01")

        assert summary.categories[0].category == UNCATEGORIZED
        assert summary.categories[0].percent_of_expenses == pytest.approx(1.0)

    def test_income_only_month(self):
        summary = summarize_period(
            [make_transaction(type=TransactionType.INCOME)], "2024-01"
        )

        assert summary.categories == []
        assert summary.total_expense == Decimal("0.00")

    def test_zero_value_expenses(self):
        """Test that shares are 0 rather than a division error."""
        summary = summarize_period([make_transaction(amount_cents=0, category="Food")], "2024-01")

        assert summary.categories[0].percent_of_expenses == 0.0

    def test_empty_month(self):
        summary = summarize_period([], "2024-01")

        assert summary.balance == Decimal("0.00")

    def test_to_dict(self, january):
        data = summarize_period(january, "2024-01").to_dict()

        assert data["numbers"] == {
            "total_income": 5000.0,
            "total_expense": 1000.0,
            "balance": 4000.0,
        }
        assert data["categories"][0]["category"] == "Rent"


class TestSummarizePeriods:
    """Tests for summarize_periods."""

    def test_range(self, january):
        result = summarize_periods(january, "2023-12", "2024-02")

        assert list(result) == ["2023-12", "2024-01", "2024-02"]
        assert result["2024-02"].total_expense == Decimal("999.00")

    def test_reversed_range(self):
        with pytest.raises(ValueError):
            summarize_periods([], "2024-02", "2024-01")


class TestExpenseBreakdown:
    """Tests for expense_breakdown."""

    def test_split(self, january):
        chain = generate_installments(30000, 3, date(2024, 1, 20), "TV", "acc3")

        breakdown = expense_breakdown(january + chain, "2024-01")

        assert breakdown.installments_cents == 10000
        assert breakdown.fixed_cents == 80000
        assert breakdown.variable_cents == 20000
        assert breakdown.total_cents == 110000
        assert [t.id for t in breakdown.items][0] == "rent"


class TestUpcomingDues:
    """Tests for upcoming_dues."""

    def test_window(self):
        today = date(2024, 1, 10)
        transactions = [
            make_transaction("rent", nature=TransactionNature.FIXED, when=date(2024, 1, 15), description="Rent"),
            make_transaction("late", nature=TransactionNature.FIXED, when=date(2024, 1, 18)),
            make_transaction("past", nature=TransactionNature.FIXED, when=date(2024, 1, 9)),
            make_transaction("coffee", when=date(2024, 1, 12)),
        ] + generate_installments(2000, 2, date(2024, 1, 10), "Shoes", "acc1")

        dues = upcoming_dues(transactions, today=today, days=7)

        assert [t.description for t in dues] == ["Shoes (1/2)", "Rent"]
        assert dues[1].id == "rent"


class TestChainProgress:
    """Tests for chain_progress."""

    def test_progress(self):
        chain = generate_installments(30000, 3, date(2024, 1, 10), "TV", "acc3")

        progress = chain_progress(chain, today=date(2024, 2, 20))

        assert progress.description == "TV"
        assert progress.paid_count == 2
        assert progress.paid_cents == 20000
        assert progress.remaining_cents == 10000
        assert progress.total_installments == 3

    def test_empty_chain(self):
        assert chain_progress([]) is None
