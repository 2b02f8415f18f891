"""Directory provider backed by the GitHub REST API through githubkit."""

from collections.abc import AsyncIterator
from datetime import datetime
from typing import Any, Self

import structlog
from githubkit.exception import GitHubException
from pydantic import ValidationError

from github_backup_manager.synchronize.exceptions import DirectoryListingError
from github_backup_manager.synchronize.models import CandidateEntry
from github_backup_manager.utils.retry import retry_on_rate_limit

from .abc import RepositoryDirectoryProvider
from .client import GitHubClient, get_github_client

logger = structlog.get_logger(__name__)

MAX_PAGE_SIZE = 100


class GitHubKitDirectoryProvider(RepositoryDirectoryProvider):
    """Lists repositories through the GitHub REST API."""

    def __init__(self, client: GitHubClient, authenticated: bool = False) -> None:
        """Initialize the provider with an already-initialized client."""
        self.client = client
        self.authenticated = authenticated
        self._authenticated_login: str | None = None

    @classmethod
    def create(cls, github_pat_token: str | None = None, github_api_url: str = "https://api.github.com") -> Self:
        """Create a provider for the given GitHub instance.

        Without a token the client is unauthenticated and only public
        repositories are visible.
        """
        logger.info("Creating client for GitHub instance", github_api_url=github_api_url, authenticated=bool(github_pat_token))
        return cls(get_github_client(github_pat_token, github_api_url), authenticated=bool(github_pat_token))

    async def _get_authenticated_login(self) -> str | None:
        if not self.authenticated:
            return None
        if self._authenticated_login is None:
            response = await self.client.rest.users.async_get_authenticated()
            self._authenticated_login = response.parsed_data.login
        return self._authenticated_login

    @retry_on_rate_limit()
    async def _fetch_page(self, account: str, own_account: bool, page: int, per_page: int) -> list[Any]:
        if own_account:
            response = await self.client.rest.repos.async_list_for_authenticated_user(
                affiliation="owner",
                sort="updated",
                per_page=per_page,
                page=page,
            )
        else:
            response = await self.client.rest.repos.async_list_for_user(
                username=account,
                sort="updated",
                per_page=per_page,
                page=page,
            )
        return list(response.parsed_data)

    @staticmethod
    def _to_candidate(repository: Any) -> CandidateEntry | None:
        # updated_at tracks metadata changes and does not always move on a push
        times: list[datetime] = [
            value for value in (getattr(repository, "updated_at", None), getattr(repository, "pushed_at", None)) if value is not None
        ]
        if not times:
            logger.warning("Repository has no modification time, skipping", repository=repository.full_name)
            return None
        return CandidateEntry(repository_id=repository.full_name, remote_updated_at=max(times))

    async def list_repositories(self, account: str, limit: int) -> AsyncIterator[CandidateEntry]:
        """Yield up to `limit` repositories owned by `account`, one page at a time."""
        try:
            login = await self._get_authenticated_login()
            own_account = login is not None and login.lower() == account.lower()
            remaining = limit
            page = 1
            while remaining > 0:
                per_page = min(MAX_PAGE_SIZE, remaining)
                repositories = await self._fetch_page(account, own_account, page, per_page)
                for repository in repositories[:remaining]:
                    entry = self._to_candidate(repository)
                    if entry is not None:
                        yield entry
                if len(repositories) < per_page:
                    break
                remaining -= len(repositories)
                page += 1
        except (GitHubException, ValidationError) as exc:
            raise DirectoryListingError(account, str(exc)) from exc
