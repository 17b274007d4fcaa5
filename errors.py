"""Exception types shared across the ledger, storage and CLI layers."""


class LedgerError(Exception):
    """Base class for errors raised by ledger operations."""


class ValidationError(LedgerError, ValueError):
    """Input was rejected before any mutation took place."""


class PropagationError(LedgerError, ValueError):
    """A propagation mode was used on a transaction it does not apply to."""


class StorageError(Exception):
    """The key-value store could not read or write a value."""
