"""Collects outdated repositories from every account into one candidate list."""

import asyncio
import time
from collections.abc import Sequence
from dataclasses import dataclass, field

import structlog

from github_backup_manager.configuration.models import ListingFailurePolicy
from github_backup_manager.github.abc import RepositoryDirectoryProvider
from github_backup_manager.ledger.ledger import UpdateLedger
from github_backup_manager.synchronize.exceptions import DirectoryListingError
from github_backup_manager.synchronize.models import CandidateEntry

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


@dataclass
class ListingResult:
    """Outdated repositories across all accounts, plus accounts whose listing was skipped."""

    candidates: list[CandidateEntry]
    failed_accounts: dict[str, DirectoryListingError] = field(default_factory=dict)


async def collect_account_candidates(
    account: str,
    ledger: UpdateLedger,
    provider: RepositoryDirectoryProvider,
    cap_per_account: int,
) -> list[CandidateEntry]:
    """List one account and keep only the repositories the ledger considers outdated."""
    start_time = time.time()
    listed = 0
    outdated: list[CandidateEntry] = []
    async for entry in provider.list_repositories(account, cap_per_account):
        listed += 1
        if ledger.is_outdated(entry):
            outdated.append(entry)
    logger.info(
        "Listed repositories for account",
        account=account,
        listed=listed,
        outdated=len(outdated),
        duration=round(time.time() - start_time, 2),
    )
    return outdated


async def collect_candidates(
    accounts: Sequence[str],
    ledger: UpdateLedger,
    provider: RepositoryDirectoryProvider,
    cap_per_account: int,
    failure_policy: ListingFailurePolicy = ListingFailurePolicy.FAIL_FAST,
) -> ListingResult:
    """List every account concurrently and merge the outdated repositories.

    The merged list is sorted by repository identifier. Repositories listed
    under more than one account appear once per account.

    With ListingFailurePolicy.FAIL_FAST the first failed account (in the
    order given) is raised once every listing has finished. With
    ListingFailurePolicy.SKIP failed accounts are reported in the result and
    the others are still used.
    """
    results = await asyncio.gather(
        *(collect_account_candidates(account, ledger, provider, cap_per_account) for account in accounts),
        return_exceptions=True,
    )

    candidates: list[CandidateEntry] = []
    failed_accounts: dict[str, DirectoryListingError] = {}
    for account, result in zip(accounts, results, strict=True):
        if isinstance(result, DirectoryListingError):
            failed_accounts.setdefault(account, result)
            logger.warning("Failed to list repositories for account", account=account, error=result.reason)
        elif isinstance(result, BaseException):
            raise result
        else:
            candidates.extend(result)

    if failed_accounts and failure_policy == ListingFailurePolicy.FAIL_FAST:
        raise next(iter(failed_accounts.values()))

    candidates.sort(key=lambda entry: entry.repository_id)
    logger.info(
        "Collected outdated repositories",
        account_count=len(accounts),
        candidate_count=len(candidates),
        failed_account_count=len(failed_accounts),
    )
    return ListingResult(candidates=candidates, failed_accounts=failed_accounts)
