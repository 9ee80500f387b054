"""Shared pieces of the scheduling policies."""

from datetime import datetime
from typing import Optional, Tuple

from loguru import logger

from ghostcommits.executor import CommitExecutor
from ghostcommits.models.config import ScheduleConfig
from ghostcommits.models.state import CommitResult, DailyState
from ghostcommits.storage import Storage


async def commit_and_record(
    executor: CommitExecutor,
    storage: Storage,
    config: ScheduleConfig,
    now: datetime,
    slot: Optional[str] = None,
) -> Tuple[CommitResult, DailyState]:
    """Commit through the guard, then update the daily counter and last commit."""
    result = await executor.execute(config)
    state = await storage.record_commit(now, slot)
    await storage.set_last_commit(result)
    logger.info(f"Commit {state.count} today - {result.sha[:7]}" + (f" ({slot})" if slot else ""))
    return result, state


class Policy:
    """Decides once per tick whether to commit."""

    def __init__(self, executor: CommitExecutor, storage: Storage, tick_interval_minutes: int):
        self.executor = executor
        self.storage = storage
        self.tick_interval_minutes = tick_interval_minutes

    async def maybe_commit(self, config: ScheduleConfig, now: datetime) -> Optional[CommitResult]:
        raise NotImplementedError
