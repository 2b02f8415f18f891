"""Persisted record of the last successful update of every mirrored repository."""

import os
import stat
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Self

import structlog
from pydantic import AwareDatetime, TypeAdapter, ValidationError

from github_backup_manager.ledger.exceptions import LedgerCorruptError, LedgerPersistError
from github_backup_manager.synchronize.models import CandidateEntry

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

_LEDGER_ADAPTER: TypeAdapter[dict[str, AwareDatetime]] = TypeAdapter(dict[str, AwareDatetime])


def _file_mode(path: Path) -> int:
    """Permission bits a rewritten `path` should carry.

    An existing ledger keeps its mode. A new one gets the mode a plain
    `open()` would give it under the current umask.
    """
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


class UpdateLedger:
    """Mapping from repository identifier to the time its last successful sync was started."""

    def __init__(self, entries: dict[str, datetime] | None = None) -> None:
        """Initialize the ledger, optionally from an existing mapping."""
        self._entries: dict[str, datetime] = dict(entries or {})

    @classmethod
    def load(cls, path: Path) -> Self:
        """Load the ledger stored at `path`.

        A missing file yields an empty ledger, so the first run treats every
        repository as outdated. A file that exists but cannot be read or
        parsed raises LedgerCorruptError rather than silently starting over.
        """
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            logger.info("No update ledger found, starting with an empty ledger", path=str(path))
            return cls()
        except OSError as exc:
            raise LedgerCorruptError(path, str(exc)) from exc

        try:
            entries = _LEDGER_ADAPTER.validate_json(raw)
        except ValidationError as exc:
            raise LedgerCorruptError(path, str(exc)) from exc

        logger.info("Loaded update ledger", path=str(path), entry_count=len(entries))
        return cls(entries)

    def save(self, path: Path) -> None:
        """Write the full ledger to `path`.

        The content goes to a temporary file in the same directory which then
        replaces `path`, so readers see either the old or the new file.
        """
        payload = _LEDGER_ADAPTER.dump_json(self._entries, indent=4)
        temp_name: str | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile("wb", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False) as temp_file:
                temp_name = temp_file.name
                temp_file.write(payload)
                temp_file.write(b"\n")
                temp_file.flush()
                os.fsync(temp_file.fileno())
            os.chmod(temp_name, _file_mode(path))
            os.replace(temp_name, path)
            temp_name = None
        except OSError as exc:
            raise LedgerPersistError(path, str(exc)) from exc
        finally:
            if temp_name is not None:
                Path(temp_name).unlink(missing_ok=True)
        logger.info("Saved update ledger", path=str(path), entry_count=len(self._entries))

    def is_outdated(self, entry: CandidateEntry) -> bool:
        """Return True if the repository has never been synced or changed since its last sync.

        A stored timestamp equal to the remote one means there is nothing new.
        """
        last_update = self._entries.get(entry.repository_id)
        if last_update is None:
            return True
        return last_update < entry.remote_updated_at

    def record(self, repository_id: str, at: datetime) -> None:
        """Set the watermark for `repository_id`, replacing any previous value."""
        self._entries[repository_id] = at

    def get(self, repository_id: str) -> datetime | None:
        """Return the stored watermark for `repository_id`, if any."""
        return self._entries.get(repository_id)

    @property
    def entries(self) -> dict[str, datetime]:
        """A copy of the underlying mapping."""
        return dict(self._entries)

    def __contains__(self, repository_id: object) -> bool:
        return repository_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, UpdateLedger):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"UpdateLedger({self._entries!r})"
