"""Unit tests for folding sync outcomes into the update ledger."""

from pathlib import Path
from unittest.mock import patch

import pytest

from github_backup_manager.ledger.committer import apply_outcomes, commit_outcomes
from github_backup_manager.ledger.exceptions import LedgerPersistError
from github_backup_manager.ledger.ledger import UpdateLedger
from github_backup_manager.synchronize.models import SyncMethod, SyncOutcome
from tests.unit.fakes import at


def test_apply_records_successful_outcomes_at_attempt_time() -> None:
    """Successful outcomes set the watermark to the time the sync started."""
    ledger = UpdateLedger()
    recorded = apply_outcomes(
        ledger,
        [
            SyncOutcome("alice/repoA", at(200), succeeded=True, method=SyncMethod.PULL),
            SyncOutcome("alice/repoB", at(210), succeeded=True, method=SyncMethod.CLONE),
        ],
    )
    assert recorded == 2
    assert ledger.entries == {"alice/repoA": at(200), "alice/repoB": at(210)}


def test_apply_leaves_failed_outcomes_untouched() -> None:
    """Failed outcomes neither create nor change entries."""
    ledger = UpdateLedger({"alice/repoA": at(50)})
    recorded = apply_outcomes(
        ledger,
        [
            SyncOutcome("alice/repoA", at(200), succeeded=False, method=SyncMethod.CLONE, error="clone reported failure"),
            SyncOutcome("alice/repoB", at(200), succeeded=False, method=SyncMethod.NONE, error="spawn failed"),
        ],
    )
    assert recorded == 0
    assert ledger.entries == {"alice/repoA": at(50)}


def test_apply_duplicate_outcomes_keep_the_last_success() -> None:
    """A repository synced twice in one run ends with the later outcome's watermark."""
    ledger = UpdateLedger()
    apply_outcomes(
        ledger,
        [
            SyncOutcome("shared/repo", at(200), succeeded=True),
            SyncOutcome("shared/repo", at(201), succeeded=True),
        ],
    )
    assert ledger.get("shared/repo") == at(201)


def test_commit_saves_exactly_once(ledger_path: Path) -> None:
    """Committing applies every outcome before a single save."""
    ledger = UpdateLedger()
    outcomes = [SyncOutcome("alice/repoA", at(200), succeeded=True), SyncOutcome("alice/repoB", at(200), succeeded=False)]
    with patch.object(UpdateLedger, "save", autospec=True) as mock_save:
        recorded = commit_outcomes(ledger, outcomes, ledger_path)
    assert recorded == 1
    mock_save.assert_called_once_with(ledger, ledger_path)


def test_commit_persists_to_disk(ledger_path: Path) -> None:
    """The committed ledger can be loaded back."""
    ledger = UpdateLedger()
    commit_outcomes(ledger, [SyncOutcome("alice/repoA", at(200), succeeded=True)], ledger_path)
    assert UpdateLedger.load(ledger_path).entries == {"alice/repoA": at(200)}


def test_commit_propagates_persist_error(ledger_path: Path) -> None:
    """A failed save is surfaced to the caller."""
    ledger = UpdateLedger()
    with patch.object(UpdateLedger, "save", side_effect=LedgerPersistError(ledger_path, "read-only file system")):
        with pytest.raises(LedgerPersistError):
            commit_outcomes(ledger, [SyncOutcome("alice/repoA", at(200), succeeded=True)], ledger_path)
