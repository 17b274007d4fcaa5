"""The unit of mutation produced by planners and applied by the ledger."""

from dataclasses import dataclass, field
from typing import List

from models.transaction import Transaction


@dataclass
class ChangeSet:
    """A complete, not-yet-applied set of changes to a transaction collection.

    Planners compute a ChangeSet from a snapshot without touching it; the
    ledger then applies additions, replacements and removals together.

    Attributes:
        added: New records to insert.
        updated: Replacement records, matched to existing ones by id.
        removed: Ids of records to drop.
    """

    added: List[Transaction] = field(default_factory=list)
    updated: List[Transaction] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.added or self.updated or self.removed)

    def __len__(self) -> int:
        return len(self.added) + len(self.updated) + len(self.removed)
