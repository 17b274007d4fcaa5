"""Expansion of a single purchase into a dated installment chain."""

from datetime import date
from typing import List, Optional

from errors import ValidationError
from models.transaction import (
    Transaction,
    TransactionNature,
    TransactionType,
    new_installment_id,
    new_transaction_id,
)
from money import split_cents
from periods import add_months
from installments.chain import strip_suffix, with_suffix


def generate_installments(
    total_cents: int,
    count: int,
    start_date: date,
    description: str,
    account_id: str,
    category: Optional[str] = None,
    type: TransactionType = TransactionType.EXPENSE,
    installment_id: Optional[str] = None,
) -> List[Transaction]:
    """Expand one purchase into ``count`` monthly installments.

    Installment i (1-based) is dated ``start_date`` + (i - 1) months and
    described as "<description> (i/count)". Amounts come from
    :func:`money.split_cents`, so the first installment carries the rounding
    remainder and the amounts always add up to ``total_cents``.

    Nothing is inserted anywhere; the caller owns the returned records.

    Args:
        total_cents: Purchase value in cents.
        count: Number of installments, at least 2.
        start_date: Date of the first installment.
        description: Base description (an existing " (i/N)" suffix is dropped).
        account_id: Account the installments are booked against.
        category: Optional category name.
        type: Transaction type shared by all members.
        installment_id: Chain id to use; generated when omitted.

    Returns:
        The new chain, ordered by installment_number.

    Raises:
        ValidationError: If count < 2, the total is negative or the
            description is empty.
    """
    if count < 2:
        raise ValidationError(f"An installment purchase needs at least 2 installments, got {count}")
    if total_cents < 0:
        raise ValidationError("Installment total cannot be negative")

    base = strip_suffix(description or "")
    if not base:
        raise ValidationError("Description is required")

    chain_id = installment_id or new_installment_id()
    amounts = split_cents(total_cents, count)

    return [
        Transaction(
            id=new_transaction_id(),
            account_id=account_id,
            type=type,
            nature=TransactionNature.INSTALLMENT,
            description=with_suffix(base, number, count),
            category=category or None,
            amount_cents=amount,
            date=add_months(start_date, number - 1),
            is_installment=True,
            installment_id=chain_id,
            installment_number=number,
            total_installments=count,
            original_amount_cents=total_cents,
        )
        for number, amount in enumerate(amounts, start=1)
    ]
