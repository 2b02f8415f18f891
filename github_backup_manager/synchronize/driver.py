"""Orchestrates a backup run: load the ledger, list, sync, then commit."""

import time

import structlog

from github_backup_manager.configuration.models import BackupConfig, DirectoryProviderType
from github_backup_manager.github.abc import RepositoryDirectoryProvider
from github_backup_manager.github.adapter import GitHubKitDirectoryProvider
from github_backup_manager.github.gh_cli import GhCliDirectoryProvider
from github_backup_manager.ledger.committer import commit_outcomes
from github_backup_manager.ledger.ledger import UpdateLedger
from github_backup_manager.synchronize.git import GitSyncPrimitive, SyncPrimitive
from github_backup_manager.synchronize.listing import collect_candidates
from github_backup_manager.synchronize.results import BackupRunResult
from github_backup_manager.synchronize.scheduler import Clock, SyncScheduler, local_now

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def build_directory_provider(config: BackupConfig) -> RepositoryDirectoryProvider:
    """Create the directory provider selected in the configuration."""
    if config.provider == DirectoryProviderType.API:
        return GitHubKitDirectoryProvider.create(github_pat_token=config.github_pat_token, github_api_url=config.github_api_url)
    return GhCliDirectoryProvider(timeout=config.listing_timeout)


def build_sync_primitive(config: BackupConfig) -> SyncPrimitive:
    """Create the sync primitive that writes beneath the configured backup directory."""
    return GitSyncPrimitive(backup_path=config.backup_path, timeout=config.sync_timeout, clone_tool=config.clone_tool)


async def run_backup_workflow(
    config: BackupConfig,
    provider: RepositoryDirectoryProvider | None = None,
    primitive: SyncPrimitive | None = None,
    clock: Clock | None = None,
) -> BackupRunResult:
    """Run one incremental backup of every configured account.

    The ledger on disk is only written after every sync has finished, so an
    interrupted run leaves it as it was before the run started.

    Raises:
        LedgerCorruptError: If the existing ledger cannot be loaded.
        DirectoryListingError: If an account cannot be listed under the fail-fast policy.
        LedgerPersistError: If the updated ledger cannot be saved.
    """
    config.data_dir.mkdir(parents=True, exist_ok=True)
    config.backup_path.mkdir(parents=True, exist_ok=True)

    ledger = UpdateLedger.load(config.ledger_path)

    provider = provider or build_directory_provider(config)
    primitive = primitive or build_sync_primitive(config)

    start_time = time.time()
    logger.info("Listing repositories", accounts=list(config.accounts), max_per_account=config.max_per_account)
    listing = await collect_candidates(
        config.accounts,
        ledger,
        provider,
        config.max_per_account,
        failure_policy=config.listing_failure_policy,
    )

    scheduler = SyncScheduler(primitive, concurrency=config.concurrency, clock=clock or local_now)
    outcomes = await scheduler.run(listing.candidates, config.limit)

    recorded = commit_outcomes(ledger, outcomes, config.ledger_path)
    logger.info(
        "Backup run finished",
        candidates=len(listing.candidates),
        attempted=len(outcomes),
        recorded=recorded,
        duration=round(time.time() - start_time, 2),
    )
    return BackupRunResult(listing.candidates, outcomes, recorded, failed_accounts=listing.failed_accounts)
