"""Helper utilities for tests."""

from datetime import date
from pathlib import Path
import sqlite3
from typing import List, Optional

from db.migrator import apply_pending_migrations
from errors import StorageError
from llm.providers.base import LLMProvider
from models.transaction import Transaction, TransactionNature, TransactionType


def run_migrations(conn: sqlite3.Connection, migrations_dir: Path) -> None:
    """Run all SQL migrations in order.

    Args:
        conn: SQLite connection to run migrations against.
        migrations_dir: Path to directory containing .sql migration files.
    """
    apply_pending_migrations(conn, migrations_dir)


def make_transaction(
    id: str = "t1",
    amount_cents: int = 1000,
    when: date = date(2024, 1, 15),
    type: TransactionType = TransactionType.EXPENSE,
    nature: TransactionNature = TransactionNature.NONE,
    description: str = "Coffee",
    category: Optional[str] = None,
    account_id: str = "acc1",
) -> Transaction:
    """Build a standalone transaction with sensible defaults."""
    return Transaction(
        id=id,
        account_id=account_id,
        type=type,
        nature=nature,
        description=description,
        category=category,
        amount_cents=amount_cents,
        date=when,
    )


def by_number(transactions: List[Transaction]) -> List[Transaction]:
    """Sort chain members by installment number."""
    return sorted(transactions, key=lambda t: t.installment_number)


class FakeProvider(LLMProvider):
    """LLM provider returning canned responses and recording requests."""

    def __init__(self, responses=None, error: Optional[Exception] = None):
        self.responses = list(responses or [])
        self.error = error
        self.requests = []

    def generate(self, system_instruction, contents, temperature=0.2, model=None):
        self.requests.append(
            {
                "system_instruction": system_instruction,
                "contents": contents,
                "temperature": temperature,
                "model": model,
            }
        )
        if self.error is not None:
            raise self.error
        return self.responses.pop(0) if self.responses else None


class MemoryStore:
    """Dict-backed key-value store; ``fail_writes`` makes every write raise."""

    def __init__(self, fail_writes: bool = False):
        self.data = {}
        self.fail_writes = fail_writes

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        if self.fail_writes:
            raise StorageError(f"Failed to write '{key}': disk full")
        self.data[key] = value

    def remove(self, key):
        if self.fail_writes:
            raise StorageError(f"Failed to remove '{key}': disk full")
        self.data.pop(key, None)
