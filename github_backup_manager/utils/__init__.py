"""Utility modules for shared functionality."""

from .github import split_repository_identifier
from .retry import retry_on_rate_limit

__all__ = [
    "split_repository_identifier",
    "retry_on_rate_limit",
]
