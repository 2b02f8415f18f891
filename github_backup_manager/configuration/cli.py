"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
from pathlib import Path
from typing import NoReturn

import typer
from dotenv import load_dotenv
from typer import Argument, Option
from typing_extensions import Annotated

from github_backup_manager import __version__
from github_backup_manager.configuration.exceptions import InvalidConfigurationValueError, RequiredConfigurationElementError
from github_backup_manager.configuration.log import configure_logging
from github_backup_manager.configuration.models import CloneTool, DirectoryProviderType
from github_backup_manager.configuration.reconcile import reconcile_backup_configuration
from github_backup_manager.ledger.exceptions import LedgerCorruptError, LedgerPersistError
from github_backup_manager.synchronize.driver import run_backup_workflow
from github_backup_manager.synchronize.exceptions import DirectoryListingError
from github_backup_manager.synchronize.results import BackupRunResult

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False)


def version_callback(value: bool) -> None:
    """Print the version and exit."""
    if value:
        typer.echo(f"github-backup-manager {__version__}")
        raise typer.Exit()


@typer_app.callback()
def main_callback(
    version: Annotated[
        bool | None,
        Option("--version", callback=version_callback, is_eager=True, help="Show the version and exit."),
    ] = None,
) -> None:
    """Incrementally mirror GitHub accounts' repositories onto local disk."""


def fail(stage: str, error: Exception) -> NoReturn:
    """Report a fatal error for `stage` and exit with a non-zero status."""
    typer.echo(f"Backup failed during {stage}: {error}", err=True)
    raise typer.Exit(1)


def print_summary(result: BackupRunResult) -> None:
    """Print what the run did."""
    typer.echo(f"Outdated repositories: {len(result.candidates)}")
    typer.echo(f"Synced: {len(result.succeeded)}")
    typer.echo(f"Failed: {len(result.failed)}")
    for outcome in result.failed:
        typer.echo(f"  - {outcome.repository_id}: {outcome.error or 'sync failed'}")
    typer.echo(f"Ledger entries recorded: {result.recorded}")
    if result.failed_accounts:
        typer.echo(f"Skipped accounts: {len(result.failed_accounts)}")
        for account, error in result.failed_accounts.items():
            typer.echo(f"  - {account}: {error.reason}")


@typer_app.command(name="backup")
def backup_cli(
    accounts: Annotated[list[str] | None, Argument(help="Accounts whose repositories to back up. Defaults to BACKUP_ACCOUNTS.")] = None,
    max_per_account: Annotated[
        int, Option("--max", "-m", envvar="BACKUP_MAX_PER_ACCOUNT", help="Maximum number of repositories to list per account.")
    ] = 1000,
    limit: Annotated[int, Option("--limit", "-l", envvar="BACKUP_LIMIT", help="Number of repositories to update this run.")] = 20,
    concurrency: Annotated[
        int, Option("--concurrency", "-c", envvar="BACKUP_CONCURRENCY", help="Maximum number of repositories synced at once.")
    ] = 8,
    sync_timeout: Annotated[
        float | None, Option(envvar="BACKUP_SYNC_TIMEOUT", help="Seconds before a pull or clone is abandoned.")
    ] = 600.0,
    listing_timeout: Annotated[
        float | None, Option(envvar="BACKUP_LISTING_TIMEOUT", help="Seconds before listing an account with gh is abandoned.")
    ] = 120.0,
    data_dir: Annotated[
        Path | None, Option(help="Directory holding the ledger and working copies. Defaults to the XDG data directory.")
    ] = None,
    provider: Annotated[
        DirectoryProviderType, Option(envvar="BACKUP_PROVIDER", help="Service used to list repositories.")
    ] = DirectoryProviderType.GH_CLI,
    clone_tool: Annotated[CloneTool, Option(envvar="BACKUP_CLONE_TOOL", help="Tool used to create new working copies.")] = CloneTool.GH,
    skip_failed_accounts: Annotated[
        bool, Option(envvar="BACKUP_SKIP_FAILED_ACCOUNTS", help="Continue with the other accounts when one cannot be listed.")
    ] = False,
    github_api_url: Annotated[str | None, Option(envvar="GITHUB_API_URL", help="GitHub API URL for the api provider.")] = None,
    github_pat_token: Annotated[
        str | None, Option(envvar="GITHUB_PAT_TOKEN", help="GitHub Personal Access Token for the api provider.")
    ] = None,
    json_logs: Annotated[bool, Option(envvar="JSON_LOGS", help="Emit logs as JSON lines.")] = False,
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug mode.")] = False,
) -> None:
    """Sync every repository that changed since its last successful backup.

    Exits non-zero when the configuration is invalid, the ledger cannot be
    loaded or saved, or (unless --skip-failed-accounts) an account cannot be
    listed. Individual repositories that fail to sync are reported and
    retried on the next run.
    """
    try:
        config = asyncio.run(
            reconcile_backup_configuration(
                cli_debug=debug,
                cli_accounts=accounts,
                cli_max_per_account=max_per_account,
                cli_limit=limit,
                cli_concurrency=concurrency,
                cli_sync_timeout=sync_timeout,
                cli_listing_timeout=listing_timeout,
                cli_data_dir=data_dir,
                cli_provider=provider,
                cli_clone_tool=clone_tool,
                cli_skip_failed_accounts=skip_failed_accounts,
                cli_github_api_url=github_api_url,
                cli_github_pat_token=github_pat_token,
            )
        )
    except (RequiredConfigurationElementError, InvalidConfigurationValueError) as exc:
        fail("configuration", exc)

    configure_logging(debug=config.debug, json_logs=json_logs)

    try:
        result = asyncio.run(run_backup_workflow(config))
    except LedgerCorruptError as exc:
        fail("ledger load", exc)
    except DirectoryListingError as exc:
        fail("listing", exc)
    except LedgerPersistError as exc:
        fail("ledger save", exc)
    except OSError as exc:
        fail("setup of the data directory", exc)

    print_summary(result)


if __name__ == "__main__":
    typer_app()
