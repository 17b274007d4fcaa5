"""Transaction service: per-user persistence of the transaction collection."""

import json
from typing import List

from errors import StorageError
from models.transaction import Transaction
from logger import get_logger

logger = get_logger()


def _data_key(user_id: str) -> str:
    return f"dindin_data_{user_id}"


class TransactionService:
    """Service for loading and saving a user's transactions."""

    def __init__(self, store):
        """Initialize the transaction service.

        Args:
            store: Key-value store holding one JSON document per user.
        """
        self.store = store

    def load(self, user_id: str) -> List[Transaction]:
        """Load all transactions of a user.

        Args:
            user_id: Owner of the collection.

        Returns:
            List of Transaction objects, empty if nothing was saved yet.

        Raises:
            StorageError: If the store fails or the stored data is corrupted.
        """
        raw = self.store.get(_data_key(user_id))
        if not raw:
            return []

        try:
            return [Transaction.from_dict(item) for item in json.loads(raw)]
        except (ValueError, KeyError, TypeError) as e:
            raise StorageError(
                f"Stored transactions for user {user_id} are corrupted: {e}"
            ) from e

    def save(self, user_id: str, transactions: List[Transaction]) -> bool:
        """Save the full collection of a user.

        A failed save is logged and reported through the return value; the
        caller keeps its in-memory state either way.

        Returns:
            True if the collection was written, False otherwise.
        """
        payload = json.dumps([t.to_dict() for t in transactions])
        try:
            self.store.set(_data_key(user_id), payload)
        except StorageError as e:
            logger.warning(f"Failed to save transactions: {e}")
            return False

        logger.debug(f"Saved {len(transactions)} transaction(s) for user {user_id}")
        return True

    def remove(self, user_id: str) -> None:
        """Delete the stored collection of a user."""
        self.store.remove(_data_key(user_id))
