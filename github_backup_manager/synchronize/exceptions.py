"""Custom exceptions for the synchronize module."""


class DirectoryListingError(Exception):
    """Raised when the repositories of an account cannot be listed."""

    def __init__(self, account: str, reason: str) -> None:
        """Initializes the exception with the account whose listing failed."""
        super().__init__(f"Failed to list repositories for account '{account}': {reason}")
        self.account = account
        self.reason = reason


class SyncInvocationError(Exception):
    """Raised when a sync command could not be started or did not finish in time.

    This is distinct from a command that ran to completion and reported
    failure through its exit status.
    """

    def __init__(self, repository_id: str, operation: str, reason: str) -> None:
        """Initializes the exception with the repository and the operation that failed."""
        super().__init__(f"Could not run {operation} for {repository_id}: {reason}")
        self.repository_id = repository_id
        self.operation = operation
        self.reason = reason
