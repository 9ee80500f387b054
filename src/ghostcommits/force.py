"""
On-demand commits that bypass the scheduling policies.

A forced commit retries once if the executor is busy, and a successful one
arms a short cooldown so repeated requests do not pile up commits.
"""

import asyncio
import math
import time
from datetime import datetime
from typing import Awaitable, Callable, Optional

from loguru import logger

from ghostcommits.errors import BusyError, NotConfiguredError
from ghostcommits.executor import CommitExecutor
from ghostcommits.models.config import ScheduleConfig
from ghostcommits.models.state import FORCE_SLOT, CommitResult, ForceResult, SchedulerState
from ghostcommits.policies.base import commit_and_record
from ghostcommits.storage import Storage

COOLDOWN_ERROR = "cooldown"


class ForceCommitter:
    def __init__(
        self,
        executor: CommitExecutor,
        storage: Storage,
        state: SchedulerState,
        cooldown_seconds: float = 4.0,
        retry_delay_seconds: float = 2.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.executor = executor
        self.storage = storage
        self.state = state
        self.cooldown_seconds = cooldown_seconds
        self.retry_delay_seconds = retry_delay_seconds
        self.clock = clock
        self.sleep = sleep

    def cooldown_remaining(self) -> float:
        if self.state.last_force_at is None:
            return 0.0
        elapsed = self.clock() - self.state.last_force_at
        return max(0.0, self.cooldown_seconds - elapsed)

    def _cooldown_result(self, remaining: float) -> ForceResult:
        seconds = math.ceil(remaining)
        logger.info(f"Force commit rejected, cooldown {seconds}s")
        return ForceResult(ok=False, error=COOLDOWN_ERROR, cooldown=seconds)

    async def _commit(self, config: ScheduleConfig, now: datetime) -> CommitResult:
        result, _ = await commit_and_record(self.executor, self.storage, config, now, FORCE_SLOT)
        return result

    async def force_commit(self, now: Optional[datetime] = None) -> ForceResult:
        remaining = self.cooldown_remaining()
        if remaining > 0:
            return self._cooldown_result(remaining)

        now = now or datetime.now()
        try:
            config = await self.storage.load_config()
            if not config:
                raise NotConfiguredError()
            try:
                result = await self._commit(config, now)
            except BusyError:
                logger.info(f"Commit in progress, retrying force commit in {self.retry_delay_seconds}s")
                await self.sleep(self.retry_delay_seconds)
                # An overlapping force may have succeeded while we waited
                remaining = self.cooldown_remaining()
                if remaining > 0:
                    return self._cooldown_result(remaining)
                result = await self._commit(config, now)
        except Exception as e:
            return await self._failed(str(e) or e.__class__.__name__, now)

        self.state.last_force_at = self.clock()
        logger.info(f"Force commit {result.sha[:7]}")
        return ForceResult(ok=True, sha=result.sha)

    async def _failed(self, message: str, now: datetime) -> ForceResult:
        logger.error(f"Force commit failed: {message}")
        try:
            await self.storage.log_error(message, now)
        except Exception as e:
            logger.error(f"Could not record force commit failure: {str(e)}")
        return ForceResult(ok=False, error=message)
