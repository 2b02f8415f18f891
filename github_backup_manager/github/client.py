"""Sets up the githubkit client used by the REST directory provider."""

from typing import TypeAlias

from githubkit import GitHub
from githubkit.auth import TokenAuthStrategy, UnauthAuthStrategy

GitHubClient: TypeAlias = GitHub[TokenAuthStrategy] | GitHub[UnauthAuthStrategy]


def get_github_client(github_pat_token: str | None, github_api_url: str) -> GitHubClient:
    """Returns a GitHub client, authenticated with a PAT when one is given.

    Supports custom base URL for GitHub Enterprise Server (GHES).
    """
    if github_pat_token:
        # Disable HTTP caching to always get fresh data
        return GitHub(auth=TokenAuthStrategy(github_pat_token), base_url=github_api_url, http_cache=False)
    return GitHub(auth=UnauthAuthStrategy(), base_url=github_api_url, http_cache=False)
