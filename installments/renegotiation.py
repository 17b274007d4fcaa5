"""Recomputation of an installment chain's tail from a new balance."""

from dataclasses import dataclass, replace
from typing import List

from errors import ValidationError
from models.transaction import Transaction, new_transaction_id
from money import split_cents
from periods import add_months
from installments.changeset import ChangeSet
from installments.chain import with_suffix


@dataclass(frozen=True)
class RenegotiationRequest:
    """New remaining balance of a chain, from the anchor onward.

    Attributes:
        new_total_cents: Value still to be paid, spread over the new tail.
        new_count: Number of installments in the new tail (at least 1).
    """

    new_total_cents: int
    new_count: int

    def validate(self) -> None:
        if self.new_count < 1:
            raise ValidationError(
                f"Renegotiation needs at least 1 installment, got {self.new_count}"
            )
        if self.new_total_cents < 0:
            raise ValidationError("Renegotiated total cannot be negative")


def resolve_renegotiation(
    chain: List[Transaction],
    anchor: Transaction,
    request: RenegotiationRequest,
) -> ChangeSet:
    """Plan the tail of a chain after a renegotiation at ``anchor``.

    With anchor number k and M = request.new_count:

    - members k .. k+M-1 get the amounts of split_cents(new_total, M) (the
      anchor takes the remainder) and are dated anchor.date + j months;
    - missing tail positions are synthesised from the anchor;
    - members numbered k+M and above are removed;
    - every surviving member gets total_installments = k+M-1 and
      original_amount_cents = sum(past amounts) + new_total.

    Members before the anchor keep their amount and date; only their
    chain totals and description suffix follow the new length.

    Args:
        chain: All current members of the chain, ordered by number.
        anchor: The edited target (its date, description, category and
            account are already the new ones).
        request: New remaining total and count.

    Returns:
        ChangeSet with the updated, added and removed members.

    Raises:
        ValidationError: If the request is invalid.
    """
    request.validate()

    k = anchor.installment_number
    count = request.new_count
    total_installments = k + count - 1

    past = [m for m in chain if m.installment_number < k]
    original_amount = sum(m.amount_cents for m in past) + request.new_total_cents

    existing = {
        m.installment_number: m
        for m in chain
        if m.installment_number >= k and m.id != anchor.id
    }
    existing[k] = anchor

    changes = ChangeSet()

    for member in past:
        changes.updated.append(
            replace(
                member,
                description=with_suffix(
                    member.description, member.installment_number, total_installments
                ),
                total_installments=total_installments,
                original_amount_cents=original_amount,
            )
        )

    amounts = split_cents(request.new_total_cents, count)
    for offset, amount in enumerate(amounts):
        number = k + offset
        tail_fields = dict(
            amount_cents=amount,
            date=add_months(anchor.date, offset),
            installment_number=number,
            total_installments=total_installments,
            original_amount_cents=original_amount,
        )
        current = existing.get(number)
        if current is not None:
            changes.updated.append(
                replace(
                    current,
                    description=with_suffix(
                        current.description, number, total_installments
                    ),
                    **tail_fields,
                )
            )
        else:
            changes.added.append(
                replace(
                    anchor,
                    id=new_transaction_id(),
                    description=with_suffix(
                        anchor.description, number, total_installments
                    ),
                    is_installment=True,
                    **tail_fields,
                )
            )

    changes.removed.extend(
        m.id
        for m in chain
        if m.installment_number >= k + count and m.id != anchor.id
    )

    return changes
