"""Wires the scheduler together and handles commands."""

import random
from typing import Optional

from loguru import logger

from ghostcommits.commands import Command, CommandResult, ForceCommit, ScheduleUpdated, Start, Stop
from ghostcommits.committer import Committer, GitCommitter
from ghostcommits.dispatcher import TickDispatcher
from ghostcommits.executor import CommitExecutor
from ghostcommits.force import ForceCommitter
from ghostcommits.models.config import MODE_FIXED, MODE_RANDOM
from ghostcommits.models.state import SchedulerState
from ghostcommits.policies.fixed_mode import FixedPolicy
from ghostcommits.policies.random_mode import RandomPolicy
from ghostcommits.settings import Settings
from ghostcommits.storage import Storage
from ghostcommits.store import JsonFileStore, KeyValueStore
from ghostcommits.timer import AlarmInfo, AlarmScheduler

ALARM_NAME = "ghost-tick"


class GhostCommitService:
    def __init__(
        self,
        settings: Settings,
        store: Optional[KeyValueStore] = None,
        committer: Optional[Committer] = None,
        alarms: Optional[AlarmScheduler] = None,
        rng: Optional[random.Random] = None,
    ):
        self.settings = settings
        store = store or JsonFileStore(settings.state_file)
        self.storage = Storage(store)
        self.state = SchedulerState()
        self.alarms = alarms or AlarmScheduler()

        self.executor = CommitExecutor(committer or GitCommitter(token=settings.token), self.state)
        self.dispatcher = TickDispatcher(
            self.storage,
            {
                MODE_RANDOM: RandomPolicy(
                    self.executor,
                    self.storage,
                    tick_interval_minutes=settings.tick_interval_minutes,
                    window_start_hour=settings.window_start_hour,
                    window_end_hour=settings.window_end_hour,
                    force_window_hours=settings.force_window_hours,
                    rng=rng,
                ),
                MODE_FIXED: FixedPolicy(self.executor, self.storage, settings.tick_interval_minutes),
            },
        )
        self.forcer = ForceCommitter(
            self.executor,
            self.storage,
            self.state,
            cooldown_seconds=settings.force_cooldown_seconds,
            retry_delay_seconds=settings.force_retry_delay_seconds,
        )

    async def _on_alarm(self) -> None:
        await self.dispatcher.tick()

    def ensure_alarm(self) -> AlarmInfo:
        existing = self.alarms.get(ALARM_NAME)
        if existing:
            return existing
        return self.alarms.create(
            ALARM_NAME,
            period_minutes=self.settings.tick_interval_minutes,
            delay_minutes=self.settings.first_tick_delay_minutes,
            callback=self._on_alarm,
        )

    async def clear_alarm(self) -> bool:
        return await self.alarms.clear(ALARM_NAME)

    def alarm_info(self) -> Optional[AlarmInfo]:
        return self.alarms.get(ALARM_NAME)

    async def disconnect(self) -> None:
        """Stop scheduling and forget the configuration and all stored state."""
        await self.clear_alarm()
        await self.storage.store.clear()
        logger.info("Disconnected, stored state cleared")

    async def startup(self) -> None:
        """Start the alarm if the stored configuration is enabled."""
        config = await self.storage.load_config()
        if config and config.enabled:
            self.ensure_alarm()
        else:
            logger.info("Ghost commits not enabled, alarm not started")

    async def handle(self, command: Command) -> CommandResult:
        if isinstance(command, Start):
            self.ensure_alarm()
            return CommandResult(ok=True)

        if isinstance(command, Stop):
            await self.clear_alarm()
            return CommandResult(ok=True)

        if isinstance(command, ForceCommit):
            result = await self.forcer.force_commit()
            return CommandResult(ok=result.ok, force=result)

        if isinstance(command, ScheduleUpdated):
            await self.clear_alarm()
            config = await self.storage.load_config()
            if config and config.enabled:
                self.ensure_alarm()
            return CommandResult(ok=True)

        raise TypeError(f"Unknown command: {command!r}")
