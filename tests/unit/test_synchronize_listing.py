"""Unit tests for collecting outdated repositories across accounts."""

import asyncio
from collections.abc import AsyncIterator

import pytest

from github_backup_manager.configuration.models import ListingFailurePolicy
from github_backup_manager.github.abc import RepositoryDirectoryProvider
from github_backup_manager.ledger.ledger import UpdateLedger
from github_backup_manager.synchronize.exceptions import DirectoryListingError
from github_backup_manager.synchronize.listing import collect_account_candidates, collect_candidates
from github_backup_manager.synchronize.models import CandidateEntry
from tests.unit.fakes import FakeDirectoryProvider, at, entry


@pytest.mark.asyncio
async def test_collect_account_keeps_only_outdated_entries() -> None:
    """Entries the ledger considers current are dropped."""
    ledger = UpdateLedger({"alice/current": at(100), "alice/changed": at(100)})
    provider = FakeDirectoryProvider({"alice": [entry("alice/current", 100), entry("alice/changed", 101), entry("alice/new", 1)]})
    candidates = await collect_account_candidates("alice", ledger, provider, 1000)
    assert [candidate.repository_id for candidate in candidates] == ["alice/changed", "alice/new"]


@pytest.mark.asyncio
async def test_collect_passes_cap_to_provider() -> None:
    """Each account is listed with the per-account cap."""
    provider = FakeDirectoryProvider({"alice": [], "bob": []})
    await collect_candidates(["alice", "bob"], UpdateLedger(), provider, 7)
    assert sorted(provider.calls) == [("alice", 7), ("bob", 7)]


@pytest.mark.asyncio
async def test_collect_merges_accounts_sorted_by_repository() -> None:
    """Candidates from all accounts are merged into one list sorted by identifier."""
    provider = FakeDirectoryProvider(
        {
            "zed": [entry("zed/b", 1), entry("zed/a", 1)],
            "alice": [entry("alice/z", 1)],
        }
    )
    result = await collect_candidates(["zed", "alice"], UpdateLedger(), provider, 1000)
    assert [candidate.repository_id for candidate in result.candidates] == ["alice/z", "zed/a", "zed/b"]
    assert result.failed_accounts == {}


@pytest.mark.asyncio
async def test_collect_keeps_duplicates_across_accounts() -> None:
    """A repository listed under two accounts is kept twice."""
    provider = FakeDirectoryProvider({"alice": [entry("org/shared", 5)], "bob": [entry("org/shared", 5)]})
    result = await collect_candidates(["alice", "bob"], UpdateLedger(), provider, 1000)
    assert [candidate.repository_id for candidate in result.candidates] == ["org/shared", "org/shared"]


@pytest.mark.asyncio
async def test_collect_fail_fast_raises_first_failed_account() -> None:
    """Under fail-fast any failed listing aborts the aggregation."""
    provider = FakeDirectoryProvider(
        {"alice": [entry("alice/repo", 1)]},
        failures={"bob": "HTTP 502", "carol": "auth required"},
    )
    with pytest.raises(DirectoryListingError) as exc_info:
        await collect_candidates(["alice", "bob", "carol"], UpdateLedger(), provider, 1000)
    assert exc_info.value.account == "bob"
    # Every account was still queried before the failure surfaced
    assert sorted(account for account, _ in provider.calls) == ["alice", "bob", "carol"]


@pytest.mark.asyncio
async def test_collect_skip_policy_reports_failed_accounts() -> None:
    """Under the skip policy the other accounts' candidates are still returned."""
    provider = FakeDirectoryProvider({"alice": [entry("alice/repo", 1)]}, failures={"bob": "HTTP 502"})
    result = await collect_candidates(["alice", "bob"], UpdateLedger(), provider, 1000, failure_policy=ListingFailurePolicy.SKIP)
    assert [candidate.repository_id for candidate in result.candidates] == ["alice/repo"]
    assert list(result.failed_accounts) == ["bob"]
    assert result.failed_accounts["bob"].reason == "HTTP 502"


@pytest.mark.asyncio
async def test_collect_unexpected_error_propagates() -> None:
    """Errors other than listing failures are not swallowed by either policy."""

    class BrokenProvider(RepositoryDirectoryProvider):
        async def list_repositories(self, account: str, limit: int) -> AsyncIterator[CandidateEntry]:
            raise RuntimeError("bug")
            yield  # pragma: no cover

    with pytest.raises(RuntimeError):
        await collect_candidates(["alice"], UpdateLedger(), BrokenProvider(), 10, failure_policy=ListingFailurePolicy.SKIP)


@pytest.mark.asyncio
async def test_collect_lists_accounts_concurrently() -> None:
    """Every account's listing is started before any of them finishes."""
    started: set[str] = set()
    all_started = asyncio.Event()
    accounts = ["alice", "bob", "carol"]

    class BarrierProvider(RepositoryDirectoryProvider):
        async def list_repositories(self, account: str, limit: int) -> AsyncIterator[CandidateEntry]:
            started.add(account)
            if len(started) == len(accounts):
                all_started.set()
            await asyncio.wait_for(all_started.wait(), timeout=5)
            yield entry(f"{account}/repo", 1)

    result = await collect_candidates(accounts, UpdateLedger(), BarrierProvider(), 10)
    assert len(result.candidates) == 3


@pytest.mark.asyncio
async def test_collect_does_not_modify_ledger() -> None:
    """Listing only reads the ledger."""
    ledger = UpdateLedger({"alice/repo": at(1)})
    provider = FakeDirectoryProvider({"alice": [entry("alice/repo", 5), entry("alice/other", 5)]})
    await collect_candidates(["alice"], ledger, provider, 10)
    assert ledger.entries == {"alice/repo": at(1)}
