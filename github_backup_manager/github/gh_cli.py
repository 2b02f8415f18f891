"""Directory provider backed by the GitHub CLI."""

from collections.abc import AsyncIterator

import structlog
from pydantic import TypeAdapter, ValidationError

from github_backup_manager.synchronize.exceptions import DirectoryListingError
from github_backup_manager.synchronize.models import CandidateEntry
from github_backup_manager.utils.process import run_command

from .abc import RepositoryDirectoryProvider

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

_LISTING_ADAPTER: TypeAdapter[list[CandidateEntry]] = TypeAdapter(list[CandidateEntry])


class GhCliDirectoryProvider(RepositoryDirectoryProvider):
    """Lists repositories with `gh repo list`, using whatever identity `gh` is logged in as."""

    def __init__(self, gh_executable: str = "gh", timeout: float | None = None) -> None:
        """Initialize the provider with the `gh` executable and a per-listing timeout."""
        self.gh_executable = gh_executable
        self.timeout = timeout

    def build_command(self, account: str, limit: int) -> list[str]:
        """Build the `gh` command line that lists `account`'s repositories."""
        return [
            self.gh_executable,
            "repo",
            "list",
            account,
            "--limit",
            str(limit),
            "--json",
            "nameWithOwner,updatedAt",
        ]

    async def list_repositories(self, account: str, limit: int) -> AsyncIterator[CandidateEntry]:
        """Yield up to `limit` repositories owned by `account`."""
        command = self.build_command(account, limit)
        try:
            result = await run_command(command, timeout=self.timeout)
        except (OSError, ValueError, TimeoutError) as exc:
            raise DirectoryListingError(account, str(exc)) from exc

        if not result.succeeded:
            stderr = result.stderr.decode(errors="replace").strip()
            raise DirectoryListingError(account, f"gh exited with status {result.returncode}: {stderr or 'no output'}")

        try:
            entries = _LISTING_ADAPTER.validate_json(result.stdout)
        except ValidationError as exc:
            raise DirectoryListingError(account, f"unexpected output from gh: {exc}") from exc

        logger.debug("Listed repositories with gh", account=account, count=len(entries))
        for entry in entries:
            yield entry
