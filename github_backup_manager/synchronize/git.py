"""Sync primitives that update or create a local working copy of a repository."""

from abc import ABC, abstractmethod
from pathlib import Path

import structlog

from github_backup_manager.configuration.models import CloneTool
from github_backup_manager.synchronize.exceptions import SyncInvocationError
from github_backup_manager.utils.github import split_repository_identifier
from github_backup_manager.utils.process import CommandResult, run_command

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class SyncPrimitive(ABC):
    """Updates or creates the local working copy of a repository.

    Both operations return whether the command succeeded and raise
    SyncInvocationError when the command could not be run at all.
    """

    @abstractmethod
    async def pull(self, repository_id: str) -> bool:
        """Update an existing working copy in place."""
        pass

    @abstractmethod
    async def clone(self, repository_id: str) -> bool:
        """Create a fresh working copy."""
        pass


class GitSyncPrimitive(SyncPrimitive):
    """Runs `git pull` and `gh repo clone` (or `git clone`) beneath a backup directory."""

    def __init__(
        self,
        backup_path: Path,
        timeout: float | None = None,
        clone_tool: CloneTool = CloneTool.GH,
        git_executable: str = "git",
        gh_executable: str = "gh",
        clone_base_url: str = "https://github.com",
    ) -> None:
        """Initialize the primitive with the backup directory and per-command timeout."""
        self.backup_path = backup_path
        self.timeout = timeout
        self.clone_tool = clone_tool
        self.git_executable = git_executable
        self.gh_executable = gh_executable
        self.clone_base_url = clone_base_url.rstrip("/")

    def working_copy_path(self, repository_id: str) -> Path:
        """Return the working copy location for `repository_id`, relative to the backup directory."""
        owner, name = split_repository_identifier(repository_id)
        return Path(owner) / name

    async def _run(self, repository_id: str, operation: str, argv: list[str]) -> bool:
        try:
            result: CommandResult = await run_command(argv, cwd=self.backup_path, timeout=self.timeout, capture_stdout=False)
        except (OSError, ValueError, TimeoutError) as exc:
            raise SyncInvocationError(repository_id, operation, str(exc)) from exc
        if not result.succeeded:
            logger.debug(
                "Sync command reported failure",
                repository=repository_id,
                operation=operation,
                returncode=result.returncode,
                stderr=result.stderr.decode(errors="replace").strip(),
            )
        return result.succeeded

    async def pull(self, repository_id: str) -> bool:
        """Run `git pull` in the repository's working copy.

        A missing working copy makes git exit non-zero, which callers treat as
        a cue to clone.
        """
        try:
            path = self.working_copy_path(repository_id)
        except ValueError as exc:
            raise SyncInvocationError(repository_id, "pull", str(exc)) from exc
        return await self._run(repository_id, "pull", [self.git_executable, "-C", str(path), "pull"])

    async def clone(self, repository_id: str) -> bool:
        """Clone the repository into its working copy location."""
        try:
            path = self.working_copy_path(repository_id)
            (self.backup_path / path.parent).mkdir(parents=True, exist_ok=True)
        except (ValueError, OSError) as exc:
            raise SyncInvocationError(repository_id, "clone", str(exc)) from exc

        if self.clone_tool == CloneTool.GIT:
            argv = [self.git_executable, "clone", f"{self.clone_base_url}/{repository_id}.git", str(path)]
        else:
            argv = [self.gh_executable, "repo", "clone", repository_id, str(path)]
        return await self._run(repository_id, "clone", argv)
