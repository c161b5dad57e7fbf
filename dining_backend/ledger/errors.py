from __future__ import annotations


class LedgerError(Exception):
    """Base class for ledger and recommendation failures."""


class InvalidInputError(LedgerError, ValueError):
    """Raised when a user id, identifier or time value is malformed."""


class LedgerStorageError(LedgerError):
    """Raised when a ledger document cannot be read or written.

    The ledger is the single source of truth, so callers should retry
    rather than fall back to in-memory state.
    """
