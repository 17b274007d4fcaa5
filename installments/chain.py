"""Installment chain helpers and the installment_id -> members index."""

import re
from typing import Dict, Iterable, List, Mapping, Optional

from models.transaction import Transaction

_SUFFIX_PATTERN = re.compile(r"\s\(\d+/\d+\)$")


def strip_suffix(description: str) -> str:
    """Remove a trailing " (i/N)" installment suffix, if any."""
    return _SUFFIX_PATTERN.sub("", description).strip()


def with_suffix(description: str, number: int, total: int) -> str:
    """Return the base description with a fresh " (number/total)" suffix."""
    return f"{strip_suffix(description)} ({number}/{total})"


def chain_description(transaction: Transaction, base: Optional[str] = None) -> str:
    """Description of a chain member re-derived from its own number and total."""
    base = transaction.description if base is None else base
    if not transaction.in_chain:
        return base
    return with_suffix(
        base, transaction.installment_number, transaction.total_installments
    )


def _sort_key(transaction: Transaction):
    return (transaction.installment_number or 0, transaction.date, transaction.id)


class ChainIndex:
    """Maps each installment_id to its member ids ordered by installment_number.

    The index is rebuilt from the full collection on load and refreshed for
    every chain a change set touches, so chain lookups never scan the whole
    collection.
    """

    def __init__(self):
        self._chains: Dict[str, List[str]] = {}

    def rebuild(self, transactions: Iterable[Transaction]) -> None:
        """Rebuild the whole index from a collection."""
        grouped: Dict[str, List[Transaction]] = {}
        for txn in transactions:
            if txn.in_chain:
                grouped.setdefault(txn.installment_id, []).append(txn)

        self._chains = {
            installment_id: [t.id for t in sorted(members, key=_sort_key)]
            for installment_id, members in grouped.items()
        }

    def refresh(
        self,
        installment_id: str,
        transactions: Mapping[str, Transaction],
        new_ids: Iterable[str] = (),
    ) -> None:
        """Re-sync one chain after its members changed.

        Args:
            installment_id: Chain to refresh.
            transactions: Current collection keyed by transaction id.
            new_ids: Ids that may have joined the chain since the last refresh.
        """
        candidates = set(self._chains.get(installment_id, []))
        candidates.update(new_ids)
        members = [
            transactions[txn_id]
            for txn_id in candidates
            if txn_id in transactions
            and transactions[txn_id].installment_id == installment_id
        ]
        if members:
            self._chains[installment_id] = [t.id for t in sorted(members, key=_sort_key)]
        else:
            self._chains.pop(installment_id, None)

    def member_ids(self, installment_id: str) -> List[str]:
        """Ids of a chain's members, ordered by installment_number."""
        return list(self._chains.get(installment_id, []))

    def members(
        self, installment_id: str, transactions: Mapping[str, Transaction]
    ) -> List[Transaction]:
        """Chain members resolved against the collection, ordered by number."""
        return [
            transactions[txn_id]
            for txn_id in self._chains.get(installment_id, [])
            if txn_id in transactions
        ]

    def chain_ids(self) -> List[str]:
        return list(self._chains)

    def __contains__(self, installment_id: str) -> bool:
        return installment_id in self._chains

    def __len__(self) -> int:
        return len(self._chains)
