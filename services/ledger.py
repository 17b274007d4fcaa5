"""In-memory transaction ledger of one user.

The ledger owns the authoritative collection. Every mutation is planned as
a ChangeSet against the current snapshot, applied in one step, then saved
(fire-and-forget) and announced to observers.
"""

from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from errors import LedgerError, ValidationError
from installments import (
    ChainIndex,
    ChangeSet,
    PropagationMode,
    RenegotiationRequest,
    TransactionChanges,
    TransactionDraft,
    plan_create,
    plan_delete,
    plan_delete_future,
    plan_edit,
)
from models.summary import PeriodSummary
from models.transaction import Transaction, TransactionNature
from models.user import User
from tools.transactions import summarize_period
from logger import get_logger

logger = get_logger()

Observer = Callable[["Ledger"], None]


@dataclass
class EditResult:
    """Outcome of an edit request.

    Attributes:
        changed: False when the target was not found (nothing was applied).
        changes: The applied ChangeSet, if any.
        saved: Whether the follow-up save succeeded (None if nothing changed).
    """

    changed: bool
    changes: Optional[ChangeSet] = None
    saved: Optional[bool] = None


class Ledger:
    """Transaction collection of one user with chain-aware mutations.

    Args:
        user: Owner of the collection; its accounts validate new input.
        transaction_service: Repository used to persist after each mutation.
        transactions: Initial collection (e.g. loaded from storage).
    """

    def __init__(
        self,
        user: User,
        transaction_service,
        transactions: Optional[Iterable[Transaction]] = None,
    ):
        self.user = user
        self.transaction_service = transaction_service
        self._transactions: Dict[str, Transaction] = {}
        self.index = ChainIndex()
        self._observers: List[Observer] = []
        self.last_save_ok: Optional[bool] = None

        for txn in transactions or []:
            self._transactions[txn.id] = txn
        self.index.rebuild(self._transactions.values())

    @classmethod
    def load(cls, user: User, transaction_service) -> "Ledger":
        """Create a ledger from the user's stored transactions."""
        transactions = transaction_service.load(user.id)
        logger.info(
            f"Loaded {len(transactions)} transaction(s) for user {user.username}"
        )
        return cls(user, transaction_service, transactions)

    # Queries

    @property
    def transactions(self) -> List[Transaction]:
        return list(self._transactions.values())

    def find(self, transaction_id: str) -> Optional[Transaction]:
        return self._transactions.get(transaction_id)

    def chain(self, installment_id: str) -> List[Transaction]:
        """Members of a chain ordered by installment_number."""
        return self.index.members(installment_id, self._transactions)

    def for_period(self, month: str) -> List[Transaction]:
        """Transactions of a YYYY-MM period, newest first."""
        return sorted(
            (t for t in self._transactions.values() if t.month_reference == month),
            key=lambda t: (t.date, t.id),
            reverse=True,
        )

    def summary(self, month: str) -> PeriodSummary:
        return summarize_period(self._transactions.values(), month)

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register a callback run after every applied mutation.

        Returns:
            A function that unregisters the observer.
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    # Mutations

    def add(self, draft: TransactionDraft) -> List[Transaction]:
        """Record a new transaction or installment purchase.

        Returns:
            The created transactions (N records for an installment purchase).

        Raises:
            ValidationError: If the draft is invalid or its account is unknown.
        """
        self._validate_account(draft.account_id)
        changes = plan_create(draft)
        self._apply(changes)

        logger.info(
            f"Added {len(changes.added)} transaction(s): {draft.description.strip()}"
        )
        return list(changes.added)

    def edit(
        self,
        target_id: str,
        changes: TransactionChanges,
        mode: PropagationMode = PropagationMode.SINGLE,
        renegotiation: Optional[RenegotiationRequest] = None,
    ) -> EditResult:
        """Edit a transaction, propagating along its chain according to ``mode``.

        Returns:
            EditResult; ``changed`` is False when the target does not exist.

        Raises:
            ValidationError: If the new values are invalid.
            PropagationError: If the mode does not apply to the target.
        """
        if self.find(target_id) is None:
            logger.info(f"Edit target {target_id} not found, nothing changed")
            return EditResult(changed=False)
        if changes.account_id is not None:
            self._validate_account(changes.account_id)

        planned = plan_edit(
            self._transactions,
            self.index,
            target_id,
            changes,
            mode=mode,
            renegotiation=renegotiation,
        )
        if planned is None:
            return EditResult(changed=False)

        saved = self._apply(planned)
        logger.info(
            f"Edited transaction {target_id} ({mode.value}): "
            f"{len(planned.updated)} updated, {len(planned.added)} added, "
            f"{len(planned.removed)} removed"
        )
        return EditResult(changed=True, changes=planned, saved=saved)

    def delete(self, transaction_id: str) -> bool:
        """Delete one transaction, compacting its chain if it has one.

        Returns:
            True if the transaction existed and was removed.
        """
        planned = plan_delete(self._transactions, self.index, transaction_id)
        if planned is None:
            return False

        self._apply(planned)
        logger.info(f"Deleted transaction {transaction_id}")
        return True

    def delete_future(self, transaction_id: str) -> int:
        """Delete a chain member and every member after it.

        Returns:
            Number of removed transactions (0 if the target does not exist).

        Raises:
            PropagationError: If the target is not part of a chain.
        """
        planned = plan_delete_future(self._transactions, self.index, transaction_id)
        if planned is None:
            return 0

        self._apply(planned)
        logger.info(
            f"Deleted {len(planned.removed)} installment(s) from transaction "
            f"{transaction_id} onward"
        )
        return len(planned.removed)

    def apply_categories(
        self, suggestions: Mapping[str, Tuple[Optional[str], Optional[str]]]
    ) -> int:
        """Apply category (and nature) suggestions in one batch.

        Suggestions for ids no longer in the ledger, and categories the user
        has not configured, are dropped silently. A suggested nature is only
        used when the transaction has none yet.

        Args:
            suggestions: Map of transaction id to (category name, nature).

        Returns:
            Number of transactions that changed.
        """
        known = {c.name for c in self.user.categories}
        planned = ChangeSet()

        for txn_id, (category, nature) in suggestions.items():
            txn = self._transactions.get(txn_id)
            if txn is None:
                logger.debug(f"Dropping categorization for stale id {txn_id}")
                continue
            if not category or category not in known:
                continue

            fields = {"category": category}
            if nature and txn.nature == TransactionNature.NONE:
                try:
                    fields["nature"] = TransactionNature(nature)
                except ValueError:
                    pass
            updated = replace(txn, **fields)
            if updated != txn:
                planned.updated.append(updated)

        if planned.is_empty():
            return 0

        self._apply(planned)
        logger.info(f"Categorized {len(planned.updated)} transaction(s)")
        return len(planned.updated)

    def _validate_account(self, account_id: str) -> None:
        if not self.user.accounts:
            raise ValidationError("No accounts configured; add an account first")
        if self.user.find_account(account_id) is None:
            raise ValidationError(f"Unknown account: {account_id}")

    def _apply(self, changes: ChangeSet) -> bool:
        """Apply a planned ChangeSet in one step, then save and notify.

        Returns:
            Whether the follow-up save succeeded.
        """
        # Check everything before touching the collection
        for txn in changes.updated:
            if txn.id not in self._transactions:
                raise LedgerError(f"Cannot update unknown transaction {txn.id}")
        for txn_id in changes.removed:
            if txn_id not in self._transactions:
                raise LedgerError(f"Cannot remove unknown transaction {txn_id}")
        for txn in changes.added:
            if txn.id in self._transactions:
                raise LedgerError(f"Transaction {txn.id} already exists")

        touched = set()
        for txn_id in changes.removed:
            touched.add(self._transactions[txn_id].installment_id)
        for txn in changes.updated:
            touched.add(self._transactions[txn.id].installment_id)
            touched.add(txn.installment_id)
        for txn in changes.added:
            touched.add(txn.installment_id)
        touched.discard(None)

        for txn_id in changes.removed:
            del self._transactions[txn_id]
        for txn in changes.updated:
            self._transactions[txn.id] = txn
        for txn in changes.added:
            self._transactions[txn.id] = txn

        new_ids = [t.id for t in changes.added] + [t.id for t in changes.updated]
        for installment_id in touched:
            self.index.refresh(installment_id, self._transactions, new_ids)

        return self._after_mutation()

    def _after_mutation(self) -> bool:
        self.last_save_ok = self.transaction_service.save(
            self.user.id, self.transactions
        )
        if not self.last_save_ok:
            logger.warning("Changes kept in memory but could not be saved")

        for observer in list(self._observers):
            observer(self)
        return self.last_save_ok
