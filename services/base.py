"""Base services container for dependency injection."""

from config import Config
from db.manager import DatabaseManager
from db.store import KeyValueStore


class Services:
    """Container for all application services.

    This class provides a centralized way to access all services and makes
    it easy to inject a test database or store.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing.
        store: Optional key-value store; built on ``db_manager`` when omitted.
    """

    def __init__(self, config: Config, db_manager=None, store=None):
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)
        self.store = store or KeyValueStore(self.db_manager)

        # Lazy import to avoid circular dependencies
        from services.users import UserService
        from services.transactions import TransactionService

        self.users = UserService(self.store)
        self.transactions = TransactionService(self.store)

    def ledger(self, user):
        """Load the ledger of a user."""
        from services.ledger import Ledger

        return Ledger.load(user, self.transactions)
