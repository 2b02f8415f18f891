"""Reconciles configuration between CLI arguments and environment variables."""

import os
from pathlib import Path

from github_backup_manager.config import settings
from github_backup_manager.configuration.exceptions import InvalidConfigurationValueError, RequiredConfigurationElementError
from github_backup_manager.configuration.models import (
    BackupConfig,
    CloneTool,
    DirectoryProviderType,
    ListingFailurePolicy,
)

APPLICATION_NAME = "github-backup-manager"


async def resolve_data_directory(cli_data_dir: Path | None) -> Path:
    """Resolve where the ledger and working copies live.

    Precedence is the command line, then BACKUP_DATA_DIR, then the XDG data
    directory ($XDG_DATA_HOME or ~/.local/share).
    """
    if cli_data_dir is not None:
        return cli_data_dir.expanduser()
    if settings.BACKUP_DATA_DIR is not None:
        return settings.BACKUP_DATA_DIR.expanduser()
    xdg_data_home = os.environ.get("XDG_DATA_HOME")
    # Relative XDG_DATA_HOME values are invalid and ignored
    if xdg_data_home and Path(xdg_data_home).is_absolute():
        return Path(xdg_data_home) / APPLICATION_NAME
    return Path.home() / ".local" / "share" / APPLICATION_NAME


async def reconcile_accounts(cli_accounts: list[str] | None) -> tuple[str, ...]:
    """Return the accounts to back up, from the command line or BACKUP_ACCOUNTS."""
    if cli_accounts:
        accounts = [account.strip() for account in cli_accounts]
    elif settings.BACKUP_ACCOUNTS:
        accounts = [account.strip() for account in settings.BACKUP_ACCOUNTS.split(",")]
    else:
        accounts = []
    accounts = [account for account in accounts if account]
    if not accounts:
        raise RequiredConfigurationElementError(name="Accounts", cli_name="ACCOUNTS", env_name="BACKUP_ACCOUNTS")
    return tuple(accounts)


async def validate_positive(name: str, value: int | float | None, allow_none: bool = False) -> None:
    """Raise InvalidConfigurationValueError unless `value` is positive (or None when allowed)."""
    if value is None and allow_none:
        return
    if value is None or value <= 0:
        expectation = "must be a positive number or unset" if allow_none else "must be a positive number"
        raise InvalidConfigurationValueError(name, value, expectation)


async def reconcile_backup_configuration(
    cli_debug: bool,
    cli_accounts: list[str] | None,
    cli_max_per_account: int,
    cli_limit: int,
    cli_concurrency: int,
    cli_sync_timeout: float | None,
    cli_listing_timeout: float | None,
    cli_data_dir: Path | None,
    cli_provider: DirectoryProviderType,
    cli_clone_tool: CloneTool,
    cli_skip_failed_accounts: bool,
    cli_github_api_url: str | None,
    cli_github_pat_token: str | None,
) -> BackupConfig:
    """Reconciles the backup command's configuration.

    Values given on the command line take precedence over settings loaded
    from the environment.

    Raises:
        RequiredConfigurationElementError: If no account was given.
        InvalidConfigurationValueError: If a limit, the concurrency or a timeout is not positive.
    """
    accounts = await reconcile_accounts(cli_accounts)
    await validate_positive("max_per_account", cli_max_per_account)
    await validate_positive("limit", cli_limit)
    await validate_positive("concurrency", cli_concurrency)
    await validate_positive("sync_timeout", cli_sync_timeout, allow_none=True)
    await validate_positive("listing_timeout", cli_listing_timeout, allow_none=True)

    return BackupConfig(
        debug=cli_debug or settings.DEBUG,
        accounts=accounts,
        max_per_account=cli_max_per_account,
        limit=cli_limit,
        concurrency=cli_concurrency,
        sync_timeout=cli_sync_timeout,
        listing_timeout=cli_listing_timeout,
        data_dir=await resolve_data_directory(cli_data_dir),
        provider=cli_provider,
        clone_tool=cli_clone_tool,
        listing_failure_policy=ListingFailurePolicy.SKIP if cli_skip_failed_accounts else ListingFailurePolicy.FAIL_FAST,
        github_api_url=cli_github_api_url or settings.GITHUB_API_URL,
        github_pat_token=cli_github_pat_token or settings.GITHUB_PAT_TOKEN,
    )
