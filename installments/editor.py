"""Planning of creates, edits and deletes against a transaction collection.

Every planner reads a snapshot (transactions keyed by id plus the chain
index) and returns a :class:`ChangeSet` without mutating anything. Input is
validated before planning starts, so a rejected request never leaves a
half-applied chain behind.
"""

from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import List, Mapping, Optional

from errors import PropagationError, ValidationError
from models.transaction import (
    Transaction,
    TransactionNature,
    TransactionType,
    new_transaction_id,
)
from periods import add_months
from installments.changeset import ChangeSet
from installments.chain import ChainIndex, chain_description, strip_suffix
from installments.generator import generate_installments
from installments.renegotiation import RenegotiationRequest, resolve_renegotiation
from logger import get_logger

logger = get_logger()


class PropagationMode(Enum):
    """How an edit to one chain member affects the rest of the chain."""

    SINGLE = "single"
    ALL_FUTURE = "all-future"
    RENEGOTIATE = "renegotiate"


@dataclass(frozen=True)
class TransactionDraft:
    """Field values for a transaction that does not exist yet.

    ``installments`` set to 2 or more turns an expense into an installment
    purchase of ``amount_cents`` in total.
    """

    account_id: str
    description: str
    amount_cents: int
    date: date
    type: TransactionType = TransactionType.EXPENSE
    category: Optional[str] = None
    nature: Optional[TransactionNature] = None
    installments: Optional[int] = None

    def validate(self) -> None:
        if not self.account_id:
            raise ValidationError("Account is required")
        if not (self.description or "").strip():
            raise ValidationError("Description is required")
        if not isinstance(self.amount_cents, int) or self.amount_cents < 0:
            raise ValidationError(f"Invalid amount: {self.amount_cents!r}")
        if self.installments is not None and self.type != TransactionType.EXPENSE:
            raise ValidationError("Only expenses can be split into installments")


@dataclass(frozen=True)
class TransactionChanges:
    """New values for the mutable fields of a transaction.

    ``None`` leaves a field unchanged. An empty string for ``category``
    clears the category.
    """

    description: Optional[str] = None
    amount_cents: Optional[int] = None
    date: Optional[date] = None
    category: Optional[str] = None
    account_id: Optional[str] = None

    def validate(self) -> None:
        if self.description is not None and not strip_suffix(self.description):
            raise ValidationError("Description cannot be empty")
        if self.amount_cents is not None and (
            not isinstance(self.amount_cents, int) or self.amount_cents < 0
        ):
            raise ValidationError(f"Invalid amount: {self.amount_cents!r}")
        if self.account_id is not None and not self.account_id:
            raise ValidationError("Account cannot be empty")

    def shared_fields(self) -> dict:
        """Fields that propagate along a chain: description, category, account."""
        fields = {}
        if self.description is not None:
            fields["description"] = self.description.strip()
        if self.category is not None:
            fields["category"] = self.category or None
        if self.account_id is not None:
            fields["account_id"] = self.account_id
        return fields


def plan_create(draft: TransactionDraft) -> ChangeSet:
    """Plan the insertion of a new transaction or installment purchase."""
    draft.validate()

    if draft.installments is not None:
        return ChangeSet(
            added=generate_installments(
                total_cents=draft.amount_cents,
                count=draft.installments,
                start_date=draft.date,
                description=draft.description,
                account_id=draft.account_id,
                category=draft.category,
                type=draft.type,
            )
        )

    return ChangeSet(
        added=[
            Transaction(
                id=new_transaction_id(),
                account_id=draft.account_id,
                type=draft.type,
                nature=draft.nature or TransactionNature.NONE,
                description=draft.description.strip(),
                category=draft.category or None,
                amount_cents=draft.amount_cents,
                date=draft.date,
            )
        ]
    )


def plan_edit(
    transactions: Mapping[str, Transaction],
    index: ChainIndex,
    target_id: str,
    changes: TransactionChanges,
    mode: PropagationMode = PropagationMode.SINGLE,
    renegotiation: Optional[RenegotiationRequest] = None,
) -> Optional[ChangeSet]:
    """Plan an edit of ``target_id`` under a propagation mode.

    Args:
        transactions: Current collection keyed by id.
        index: Chain index in sync with ``transactions``.
        target_id: Id of the edited transaction.
        changes: New field values.
        mode: SINGLE touches only the target. ALL_FUTURE carries description,
            category and account (and a shifted date) to every member from
            the target onward, leaving amounts as they are. RENEGOTIATE
            rebuilds the tail from ``renegotiation``.
        renegotiation: Required for RENEGOTIATE, ignored otherwise.

    Returns:
        The planned ChangeSet, or None if the target does not exist.

    Raises:
        ValidationError: If the changes or renegotiation request are invalid.
        PropagationError: If a chain mode is used on a standalone
            transaction.
    """
    target = transactions.get(target_id)
    if target is None:
        logger.info(f"Edit target {target_id} not found, nothing changed")
        return None

    changes.validate()

    if mode is PropagationMode.SINGLE:
        return ChangeSet(updated=[_edit_single(target, changes)])

    if not target.in_chain:
        raise PropagationError(
            f"Mode '{mode.value}' only applies to installment transactions; "
            f"'{target.description}' is not part of a chain"
        )

    chain = index.members(target.installment_id, transactions)

    if mode is PropagationMode.ALL_FUTURE:
        return _plan_all_future(chain, target, changes)

    if mode is PropagationMode.RENEGOTIATE:
        if renegotiation is None:
            raise ValidationError("Mode 'renegotiate' requires a new total and count")
        return _plan_renegotiation(chain, target, changes, renegotiation)

    raise ValueError(f"Unsupported propagation mode: {mode}")


def plan_delete(
    transactions: Mapping[str, Transaction], index: ChainIndex, target_id: str
) -> Optional[ChangeSet]:
    """Plan the removal of a single transaction.

    Removing a chain member compacts the chain: later members move down one
    number, every member's total_installments drops by one and
    original_amount_cents drops by the removed amount. Dates are kept.

    Returns:
        The planned ChangeSet, or None if the target does not exist.
    """
    target = transactions.get(target_id)
    if target is None:
        logger.info(f"Delete target {target_id} not found, nothing changed")
        return None

    changes = ChangeSet(removed=[target.id])
    if not target.in_chain:
        return changes

    chain = index.members(target.installment_id, transactions)
    survivors = [m for m in chain if m.id != target.id]
    chain_total = target.total_installments or len(chain)
    original_amount = _chain_original(chain) - target.amount_cents

    for member in survivors:
        number = member.installment_number
        if number > target.installment_number:
            number -= 1
        changes.updated.append(
            _renumbered(
                member,
                number=number,
                total=chain_total - 1,
                original_amount=max(0, original_amount),
            )
        )

    return changes


def plan_delete_future(
    transactions: Mapping[str, Transaction], index: ChainIndex, target_id: str
) -> Optional[ChangeSet]:
    """Plan the removal of a chain member and every member after it.

    Survivors get total_installments = k - 1 and original_amount_cents equal
    to their own sum.

    Returns:
        The planned ChangeSet, or None if the target does not exist.

    Raises:
        PropagationError: If the target is not part of a chain.
    """
    target = transactions.get(target_id)
    if target is None:
        logger.info(f"Delete target {target_id} not found, nothing changed")
        return None

    if not target.in_chain:
        raise PropagationError(
            f"'{target.description}' is not part of an installment chain"
        )

    k = target.installment_number
    chain = index.members(target.installment_id, transactions)
    survivors = [m for m in chain if m.installment_number < k]
    original_amount = sum(m.amount_cents for m in survivors)

    changes = ChangeSet(
        removed=[m.id for m in chain if m.installment_number >= k]
    )
    changes.updated.extend(
        _renumbered(
            m,
            number=m.installment_number,
            total=k - 1,
            original_amount=original_amount,
        )
        for m in survivors
    )
    return changes


def _edit_single(target: Transaction, changes: TransactionChanges) -> Transaction:
    fields = changes.shared_fields()
    if changes.amount_cents is not None:
        fields["amount_cents"] = changes.amount_cents
    if changes.date is not None:
        fields["date"] = changes.date

    edited = replace(target, **fields)
    if edited.in_chain:
        edited = replace(edited, description=chain_description(edited))
    return edited


def _plan_all_future(
    chain: List[Transaction], target: Transaction, changes: TransactionChanges
) -> ChangeSet:
    if changes.amount_cents is not None and changes.amount_cents != target.amount_cents:
        logger.debug(
            f"Ignoring amount {changes.amount_cents} for all-future edit of {target.id}"
        )

    k = target.installment_number
    shared = changes.shared_fields()
    planned = ChangeSet()

    for member in chain:
        if member.installment_number < k:
            continue
        fields = dict(shared)
        if changes.date is not None:
            fields["date"] = add_months(changes.date, member.installment_number - k)
        edited = replace(member, **fields)
        planned.updated.append(replace(edited, description=chain_description(edited)))

    return planned


def _plan_renegotiation(
    chain: List[Transaction],
    target: Transaction,
    changes: TransactionChanges,
    request: RenegotiationRequest,
) -> ChangeSet:
    shared = changes.shared_fields()
    anchor = replace(target, **shared)
    if changes.date is not None:
        anchor = replace(anchor, date=changes.date)

    planned = resolve_renegotiation(chain, anchor, request)

    # Description, category and account edits cover the whole new tail
    if shared:
        k = anchor.installment_number
        planned.updated = [
            _with_shared(m, shared) if m.installment_number >= k else m
            for m in planned.updated
        ]
    return planned


def _with_shared(member: Transaction, shared: dict) -> Transaction:
    edited = replace(member, **shared)
    return replace(edited, description=chain_description(edited))


def _renumbered(
    member: Transaction, number: int, total: int, original_amount: int
) -> Transaction:
    edited = replace(
        member,
        installment_number=number,
        total_installments=total,
        original_amount_cents=original_amount,
    )
    return replace(edited, description=chain_description(edited))


def _chain_original(chain: List[Transaction]) -> int:
    for member in chain:
        if member.original_amount_cents is not None:
            return member.original_amount_cents
    return sum(m.amount_cents for m in chain)
