from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional
import time
import uuid

from periods import month_reference


class TransactionType(str, Enum):
    EXPENSE = "expense"
    INCOME = "income"
    LOAN = "loan"
    TRANSFER = "transfer"
    LOAN_PAYMENT = "loan_payment"


class TransactionNature(str, Enum):
    FIXED = "fixed"
    VARIABLE = "variable"
    EXTRA_INCOME = "extra_income"
    SALARY = "salary"
    LOAN_PAYMENT = "loan_payment"
    LOAN_RECEIVED = "loan_received"
    INSTALLMENT = "installment"
    NONE = "none"  # persisted as null


# Types that count as money going out in summaries
EXPENSE_TYPES = frozenset({TransactionType.EXPENSE, TransactionType.LOAN_PAYMENT})


def new_transaction_id() -> str:
    """Generate a unique transaction id."""
    return uuid.uuid4().hex


def new_installment_id() -> str:
    """Generate a chain id from the creation timestamp plus a random suffix."""
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"


@dataclass(frozen=True)
class Transaction:
    id: str
    account_id: str
    type: TransactionType
    nature: TransactionNature
    description: str
    category: Optional[str]  # category NAME, not id
    amount_cents: int  # always >= 0
    date: date

    is_installment: bool = False
    installment_id: Optional[str] = None
    installment_number: Optional[int] = None
    total_installments: Optional[int] = None
    original_amount_cents: Optional[int] = None

    @property
    def month_reference(self) -> str:
        """YYYY-MM period of the transaction, always derived from ``date``."""
        return month_reference(self.date)

    @property
    def in_chain(self) -> bool:
        """True when the transaction belongs to an installment chain."""
        return bool(self.installment_id)

    def to_dict(self) -> dict:
        """Convert transaction to dictionary for storage."""
        data = {
            "id": self.id,
            "account_id": self.account_id,
            "type": self.type.value,
            "nature": (
                None if self.nature == TransactionNature.NONE else self.nature.value
            ),
            "description": self.description,
            "category": self.category,
            "amount_cents": self.amount_cents,
            "date": self.date.isoformat(),
            "month_reference": self.month_reference,
        }
        if self.in_chain:
            data.update(
                {
                    "is_installment": self.is_installment,
                    "installment_id": self.installment_id,
                    "installment_number": self.installment_number,
                    "total_installments": self.total_installments,
                    "original_amount_cents": self.original_amount_cents,
                }
            )
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Transaction":
        """Build a Transaction from its stored dictionary.

        A stored ``month_reference`` is ignored; it is always re-derived.
        """
        nature = data.get("nature")
        return cls(
            id=str(data["id"]),
            account_id=str(data["account_id"]),
            type=TransactionType(data["type"]),
            nature=TransactionNature(nature) if nature else TransactionNature.NONE,
            description=data.get("description", ""),
            category=data.get("category") or None,
            amount_cents=int(data.get("amount_cents") or 0),
            date=date.fromisoformat(data["date"]),
            is_installment=bool(data.get("is_installment", False)),
            installment_id=data.get("installment_id") or None,
            installment_number=data.get("installment_number"),
            total_installments=data.get("total_installments"),
            original_amount_cents=data.get("original_amount_cents"),
        )
