"""Base ABC for repository directory providers."""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from github_backup_manager.synchronize.models import CandidateEntry


class RepositoryDirectoryProvider(ABC):
    """Lists the repositories of an account with their last-modified time."""

    @abstractmethod
    def list_repositories(self, account: str, limit: int) -> AsyncIterator[CandidateEntry]:
        """Yield up to `limit` repositories owned by `account`.

        Implementations raise DirectoryListingError when the listing fails.
        """
        pass
