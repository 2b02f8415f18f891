"""Folds sync outcomes back into the update ledger."""

from collections.abc import Iterable
from pathlib import Path

import structlog

from github_backup_manager.ledger.ledger import UpdateLedger
from github_backup_manager.synchronize.models import SyncOutcome

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def apply_outcomes(ledger: UpdateLedger, outcomes: Iterable[SyncOutcome]) -> int:
    """Record every successful outcome in the ledger and return how many were recorded.

    Failed outcomes leave their entry untouched so the repository stays a
    candidate on the next run.
    """
    recorded = 0
    for outcome in outcomes:
        if not outcome.succeeded:
            logger.debug("Leaving ledger entry unchanged for failed sync", repository=outcome.repository_id)
            continue
        ledger.record(outcome.repository_id, outcome.attempted_at)
        recorded += 1
    return recorded


def commit_outcomes(ledger: UpdateLedger, outcomes: Iterable[SyncOutcome], path: Path) -> int:
    """Apply `outcomes` to `ledger` and persist it once."""
    recorded = apply_outcomes(ledger, outcomes)
    ledger.save(path)
    logger.info("Committed sync outcomes to update ledger", recorded=recorded, path=str(path))
    return recorded
