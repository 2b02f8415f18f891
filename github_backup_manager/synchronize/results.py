"""Contains results of a backup run."""

from github_backup_manager.synchronize.exceptions import DirectoryListingError
from github_backup_manager.synchronize.models import CandidateEntry, SyncOutcome


class BackupRunResult:
    """Contains results of the backup workflow."""

    def __init__(
        self,
        candidates: list[CandidateEntry],
        outcomes: list[SyncOutcome],
        recorded: int,
        failed_accounts: dict[str, DirectoryListingError] | None = None,
    ) -> None:
        """Initialize the result with the candidates, their outcomes and the ledger entries recorded."""
        self.candidates = candidates
        self.outcomes = outcomes
        self.recorded = recorded
        self.failed_accounts = failed_accounts or {}

    @property
    def succeeded(self) -> list[SyncOutcome]:
        """Outcomes of repositories that were synced."""
        return [outcome for outcome in self.outcomes if outcome.succeeded]

    @property
    def failed(self) -> list[SyncOutcome]:
        """Outcomes of repositories that remain outdated."""
        return [outcome for outcome in self.outcomes if not outcome.succeeded]
