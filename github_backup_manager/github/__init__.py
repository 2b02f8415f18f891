"""Repository directory providers."""

from .abc import RepositoryDirectoryProvider
from .adapter import GitHubKitDirectoryProvider
from .gh_cli import GhCliDirectoryProvider

__all__ = [
    "RepositoryDirectoryProvider",
    "GhCliDirectoryProvider",
    "GitHubKitDirectoryProvider",
]
