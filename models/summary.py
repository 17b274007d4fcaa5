"""Derived, never-persisted views over the transaction collection."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from models.transaction import Transaction

UNCATEGORIZED = "Uncategorized"


@dataclass(frozen=True)
class CategoryShare:
    category: str
    amount: Decimal  # major units
    percent_of_expenses: float  # 0.0 to 1.0


@dataclass(frozen=True)
class PeriodSummary:
    """Monetary summary of one YYYY-MM period.

    Totals are in major units; ``categories`` covers expense and
    loan_payment transactions, largest bucket first.
    """

    month: str
    period_label: str
    total_income: Decimal
    total_expense: Decimal
    balance: Decimal
    categories: List[CategoryShare] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "period_label": self.period_label,
            "numbers": {
                "total_income": float(self.total_income),
                "total_expense": float(self.total_expense),
                "balance": float(self.balance),
            },
            "categories": [
                {
                    "category": c.category,
                    "amount": float(c.amount),
                    "percent_of_expenses": c.percent_of_expenses,
                }
                for c in self.categories
            ],
        }


@dataclass(frozen=True)
class ExpenseBreakdown:
    """Split of a month's expenses into installment, fixed and variable parts (cents)."""

    total_cents: int
    installments_cents: int
    fixed_cents: int
    variable_cents: int
    items: List[Transaction] = field(default_factory=list)


@dataclass(frozen=True)
class ChainProgress:
    """Payment progress of one installment chain (cents)."""

    installment_id: str
    description: str
    total_cents: int
    paid_cents: int
    remaining_cents: int
    paid_count: int
    total_installments: Optional[int]
