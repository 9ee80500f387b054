"""
Random mode: spread the daily target across the waking window.

Each tick commits with probability remaining / checks_left, so the chance grows
as the day runs out of opportunities. During the last hour of the window every
tick commits until the target is reached.
"""

import random
from datetime import datetime
from typing import Optional

from loguru import logger

from ghostcommits.executor import CommitExecutor
from ghostcommits.models.config import ScheduleConfig
from ghostcommits.models.state import CommitResult
from ghostcommits.policies.base import Policy, commit_and_record
from ghostcommits.storage import Storage


def commit_probability(target: int, count: int, checks_per_day: float) -> float:
    remaining = target - count
    checks_left = max(1, checks_per_day - count)
    return remaining / checks_left


class RandomPolicy(Policy):
    def __init__(
        self,
        executor: CommitExecutor,
        storage: Storage,
        tick_interval_minutes: int = 5,
        window_start_hour: int = 6,
        window_end_hour: int = 22,
        force_window_hours: int = 1,
        rng: Optional[random.Random] = None,
    ):
        super().__init__(executor, storage, tick_interval_minutes)
        self.window_start_hour = window_start_hour
        self.window_end_hour = window_end_hour
        self.force_window_hours = force_window_hours
        self.rng = rng or random.Random()

    @property
    def checks_per_day(self) -> float:
        window_minutes = (self.window_end_hour - self.window_start_hour) * 60
        return window_minutes / self.tick_interval_minutes

    def in_window(self, now: datetime) -> bool:
        return self.window_start_hour <= now.hour < self.window_end_hour

    def in_force_window(self, now: datetime) -> bool:
        return now.hour >= self.window_end_hour - self.force_window_hours

    async def maybe_commit(self, config: ScheduleConfig, now: datetime) -> Optional[CommitResult]:
        target = config.commits_per_day
        state = await self.storage.read_daily_state(now)
        if state.count >= target:
            logger.debug(f"Daily target reached ({state.count}/{target})")
            return None

        probability = commit_probability(target, state.count, self.checks_per_day)

        if not self.in_window(now):
            logger.debug(f"Outside commit window at {now:%H:%M}")
            return None

        if not self.in_force_window(now):
            draw = self.rng.random()
            if draw > probability:
                logger.debug(f"Skipping tick (draw {draw:.3f} > p {probability:.3f})")
                return None

        result, _ = await commit_and_record(self.executor, self.storage, config, now)
        return result
