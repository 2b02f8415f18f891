"""Contains exceptions raised when loading or persisting the update ledger."""

from pathlib import Path


class LedgerError(Exception):
    """Base class for update ledger errors."""

    def __init__(self, path: Path, reason: str, message: str) -> None:
        """Initializes the exception with the ledger path and the underlying reason."""
        super().__init__(f"{message} {path}: {reason}")
        self.path = path
        self.reason = reason


class LedgerCorruptError(LedgerError):
    """Raised when an existing ledger file cannot be read or parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        """Initializes the exception with the ledger path and the parse failure."""
        super().__init__(path, reason, "Unable to load update ledger")


class LedgerPersistError(LedgerError):
    """Raised when the ledger cannot be written to disk."""

    def __init__(self, path: Path, reason: str) -> None:
        """Initializes the exception with the ledger path and the write failure."""
        super().__init__(path, reason, "Unable to save update ledger")
