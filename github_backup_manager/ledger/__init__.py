"""Update ledger persistence and the committer that feeds it."""

from .committer import apply_outcomes, commit_outcomes
from .exceptions import LedgerCorruptError, LedgerError, LedgerPersistError
from .ledger import UpdateLedger

__all__ = [
    "UpdateLedger",
    "apply_outcomes",
    "commit_outcomes",
    "LedgerError",
    "LedgerCorruptError",
    "LedgerPersistError",
]
