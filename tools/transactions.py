"""Transaction analysis tools.

Pure functions over a transaction collection; none of them mutate their
input, so they are safe to call as often as the collection changes.
"""

from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from models.summary import (
    UNCATEGORIZED,
    CategoryShare,
    ChainProgress,
    ExpenseBreakdown,
    PeriodSummary,
)
from models.transaction import (
    EXPENSE_TYPES,
    Transaction,
    TransactionNature,
    TransactionType,
)
from money import from_cents
from periods import parse_month, period_label, shift_period
from installments.chain import strip_suffix


def get_period_transactions(
    transactions: Iterable[Transaction], month: str
) -> List[Transaction]:
    """Get the transactions of one YYYY-MM period."""
    return [t for t in transactions if t.month_reference == month]


def summarize_period(transactions: Iterable[Transaction], month: str) -> PeriodSummary:
    """Summarize income, expenses and expense categories of a period.

    Income is every ``income`` transaction; expenses are ``expense`` and
    ``loan_payment`` transactions. Transactions without a category are
    grouped under "Uncategorized". Each category's share of expenses is 0
    when the month has no expenses.

    Args:
        transactions: Full transaction collection.
        month: Period key (YYYY-MM).

    Returns:
        PeriodSummary with totals in major units and categories sorted by
        amount, largest first.

    Example:
        A month with 5000.00 income, Food 200.00 and Rent 800.00 gives
        total_income=5000.00, total_expense=1000.00, balance=4000.00 and
        shares Rent 0.8, Food 0.2.
    """
    label = period_label(month)
    in_period = get_period_transactions(transactions, month)

    income_cents = 0
    expense_cents = 0
    by_category: Dict[str, int] = {}

    for txn in in_period:
        if txn.type == TransactionType.INCOME:
            income_cents += txn.amount_cents
        elif txn.type in EXPENSE_TYPES:
            expense_cents += txn.amount_cents
            bucket = txn.category or UNCATEGORIZED
            by_category[bucket] = by_category.get(bucket, 0) + txn.amount_cents

    categories = [
        CategoryShare(
            category=name,
            amount=from_cents(cents),
            percent_of_expenses=(cents / expense_cents) if expense_cents > 0 else 0.0,
        )
        for name, cents in sorted(
            by_category.items(), key=lambda item: (-item[1], item[0])
        )
    ]

    return PeriodSummary(
        month=month,
        period_label=label,
        total_income=from_cents(income_cents),
        total_expense=from_cents(expense_cents),
        balance=from_cents(income_cents - expense_cents),
        categories=categories,
    )


def summarize_periods(
    transactions: Iterable[Transaction], start_month: str, end_month: str
) -> Dict[str, PeriodSummary]:
    """Summarize every month between two periods (inclusive).

    Returns:
        Dictionary mapping YYYY-MM to its PeriodSummary, in calendar order.

    Raises:
        ValueError: If a period key is invalid or the range is reversed.
    """
    if parse_month(start_month) > parse_month(end_month):
        raise ValueError("Start period must not be after end period")

    collection = list(transactions)
    result = {}
    month = start_month
    while parse_month(month) <= parse_month(end_month):
        result[month] = summarize_period(collection, month)
        month = shift_period(month, 1)
    return result


def expense_breakdown(
    transactions: Iterable[Transaction], month: str
) -> ExpenseBreakdown:
    """Split a month's expenses into installments, fixed and variable costs.

    Variable is whatever is neither an installment nor a fixed expense.
    Items are ordered by date, oldest first.
    """
    expenses = [
        t for t in get_period_transactions(transactions, month) if t.type in EXPENSE_TYPES
    ]
    total = sum(t.amount_cents for t in expenses)
    installments = sum(t.amount_cents for t in expenses if t.is_installment)
    fixed = sum(
        t.amount_cents
        for t in expenses
        if t.nature == TransactionNature.FIXED and not t.is_installment
    )

    return ExpenseBreakdown(
        total_cents=total,
        installments_cents=installments,
        fixed_cents=fixed,
        variable_cents=total - installments - fixed,
        items=sorted(expenses, key=lambda t: (t.date, t.id)),
    )


def upcoming_dues(
    transactions: Iterable[Transaction],
    today: Optional[date] = None,
    days: int = 7,
) -> List[Transaction]:
    """Fixed and installment expenses due within the next ``days`` days.

    Only dates in [today, today + days] count; earlier ones are considered paid.
    """
    today = today or date.today()
    horizon = today + timedelta(days=days)

    return sorted(
        (
            t
            for t in transactions
            if t.type in EXPENSE_TYPES
            and (t.nature == TransactionNature.FIXED or t.is_installment)
            and today <= t.date <= horizon
        ),
        key=lambda t: (t.date, t.id),
    )


def chain_progress(
    chain: List[Transaction], today: Optional[date] = None
) -> Optional[ChainProgress]:
    """Payment progress of an installment chain.

    Members dated before ``today`` count as paid. The total is the chain's
    original_amount_cents, or the members' sum when it was never recorded.

    Args:
        chain: Members of one chain.
        today: Reference day, defaults to today.

    Returns:
        ChainProgress, or None for an empty chain.
    """
    if not chain:
        return None

    today = today or date.today()
    members = sorted(chain, key=lambda t: t.installment_number or 0)
    first = members[0]

    paid = [t for t in members if t.date < today]
    paid_cents = sum(t.amount_cents for t in paid)
    total_cents = first.original_amount_cents
    if total_cents is None:
        total_cents = sum(t.amount_cents for t in members)

    return ChainProgress(
        installment_id=first.installment_id,
        description=strip_suffix(first.description),
        total_cents=total_cents,
        paid_cents=paid_cents,
        remaining_cents=max(0, total_cents - paid_cents),
        paid_count=len(paid),
        total_installments=first.total_installments,
    )
