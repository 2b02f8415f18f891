"""Models for configuration between CLI arguments and environment variables."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

LEDGER_FILE_NAME = "last_updated.json"
BACKUP_DIRECTORY_NAME = "backup"


class DirectoryProviderType(str, Enum):
    """Enum for the services that can list an account's repositories."""

    GH_CLI = "gh"
    API = "api"


class ListingFailurePolicy(str, Enum):
    """Enum for how a failed account listing affects the run."""

    FAIL_FAST = "fail-fast"
    SKIP = "skip"


class CloneTool(str, Enum):
    """Enum for the tools that can create a fresh working copy."""

    GH = "gh"
    GIT = "git"


@dataclass(frozen=True)
class BackupConfig:
    """Configuration class for the backup command."""

    debug: bool
    accounts: tuple[str, ...]
    max_per_account: int
    limit: int
    concurrency: int
    sync_timeout: float | None
    listing_timeout: float | None
    data_dir: Path
    provider: DirectoryProviderType
    clone_tool: CloneTool
    listing_failure_policy: ListingFailurePolicy
    github_api_url: str
    github_pat_token: str | None

    @property
    def ledger_path(self) -> Path:
        """Location of the update ledger."""
        return self.data_dir / LEDGER_FILE_NAME

    @property
    def backup_path(self) -> Path:
        """Directory that holds one working copy per repository."""
        return self.data_dir / BACKUP_DIRECTORY_NAME
