"""Applies the sync primitive to candidates with bounded concurrency."""

import asyncio
import time
from collections.abc import Callable, Sequence
from datetime import datetime

import structlog

from github_backup_manager.synchronize.exceptions import SyncInvocationError
from github_backup_manager.synchronize.git import SyncPrimitive
from github_backup_manager.synchronize.models import CandidateEntry, SyncMethod, SyncOutcome

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]


def local_now() -> datetime:
    """Current time with the local UTC offset attached."""
    return datetime.now().astimezone()


class SyncScheduler:
    """Runs pull-then-clone for each candidate, at most `concurrency` at a time."""

    def __init__(self, primitive: SyncPrimitive, concurrency: int = 8, clock: Clock = local_now) -> None:
        """Initialize the scheduler with a sync primitive, a worker bound and a clock."""
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")
        self.primitive = primitive
        self.concurrency = concurrency
        self.clock = clock

    async def sync_candidate(self, candidate: CandidateEntry) -> SyncOutcome:
        """Sync one candidate, falling back to a clone when the pull reports failure.

        The watermark is taken before the pull starts so that changes pushed
        while the sync is running are picked up by the next run.
        """
        repository_id = candidate.repository_id
        attempted_at = self.clock()

        try:
            pulled = await self.primitive.pull(repository_id)
        except SyncInvocationError as exc:
            logger.error("Could not run pull", repository=repository_id, error=exc.reason)
            return SyncOutcome(repository_id, attempted_at, succeeded=False, method=SyncMethod.NONE, error=str(exc))

        if pulled:
            logger.info("Pulled repository", repository=repository_id)
            return SyncOutcome(repository_id, attempted_at, succeeded=True, method=SyncMethod.PULL)

        logger.info("Pull failed, cloning repository", repository=repository_id)
        try:
            cloned = await self.primitive.clone(repository_id)
        except SyncInvocationError as exc:
            logger.error("Could not run clone", repository=repository_id, error=exc.reason)
            return SyncOutcome(repository_id, attempted_at, succeeded=False, method=SyncMethod.CLONE, error=str(exc))

        if cloned:
            logger.info("Cloned repository", repository=repository_id)
            return SyncOutcome(repository_id, attempted_at, succeeded=True, method=SyncMethod.CLONE)
        logger.warning("Clone failed", repository=repository_id)
        return SyncOutcome(repository_id, attempted_at, succeeded=False, method=SyncMethod.CLONE, error="clone reported failure")

    def _outcome_from_result(self, candidate: CandidateEntry, result: SyncOutcome | BaseException) -> SyncOutcome:
        """Turn one gathered result into an outcome.

        An unexpected exception fails only its own candidate. Exceptions that
        are not Exception subclasses (cancellation, KeyboardInterrupt) are
        re-raised.
        """
        if isinstance(result, SyncOutcome):
            return result
        if not isinstance(result, Exception):
            raise result
        logger.error(
            "Unexpected error while syncing repository",
            repository=candidate.repository_id,
            error_type=type(result).__name__,
            error=str(result),
        )
        return SyncOutcome(candidate.repository_id, self.clock(), succeeded=False, method=SyncMethod.NONE, error=str(result))

    async def run(self, candidates: Sequence[CandidateEntry], limit: int) -> list[SyncOutcome]:
        """Sync the first `limit` candidates and return one outcome per synced candidate.

        Candidates beyond `limit` are left for a later run.
        """
        selected = list(candidates[: max(limit, 0)])
        if len(candidates) > len(selected):
            logger.info("Deferring candidates beyond the run limit", limit=limit, deferred=len(candidates) - len(selected))

        semaphore = asyncio.Semaphore(self.concurrency)

        async def bounded(candidate: CandidateEntry) -> SyncOutcome:
            async with semaphore:
                return await self.sync_candidate(candidate)

        start_time = time.time()
        gathered = await asyncio.gather(*(bounded(candidate) for candidate in selected), return_exceptions=True)
        outcomes = [self._outcome_from_result(candidate, result) for candidate, result in zip(selected, gathered, strict=True)]
        logger.info(
            "Synced repositories",
            attempted=len(outcomes),
            succeeded=sum(1 for outcome in outcomes if outcome.succeeded),
            failed=sum(1 for outcome in outcomes if not outcome.succeeded),
            duration=round(time.time() - start_time, 2),
        )
        return outcomes
