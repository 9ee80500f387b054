"""Typed access to the records the scheduler persists."""

from datetime import datetime
from typing import List, Optional, Tuple

from loguru import logger

from ghostcommits.models.config import ScheduleConfig
from ghostcommits.models.state import CommitResult, DailyState, ErrorEntry, LastCommitInfo
from ghostcommits.store import KeyValueStore

CONFIG_KEY = "config"
DAILY_STATE_KEY = "dailyState"
LAST_COMMIT_KEY = "lastCommit"
ERROR_LOG_KEY = "errorLog"

ERROR_LOG_CAPACITY = 20


def today_key(now: datetime) -> str:
    """Local calendar date as YYYY-MM-DD."""
    return now.strftime("%Y-%m-%d")


def get_or_reset_daily_state(record: Optional[dict], today: str) -> Tuple[DailyState, bool]:
    """Return today's state from a stored record.

    A missing record or one from another day yields a fresh zero state, and the
    second element of the tuple tells the caller that it must be persisted.
    """
    if record and record.get("date") == today:
        return DailyState.from_dict(record), False
    return DailyState(date=today), True


class Storage:
    """Configuration, daily counters, last commit and error log."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def load_config(self) -> Optional[ScheduleConfig]:
        data = await self.store.get(CONFIG_KEY)
        if not data:
            return None
        return ScheduleConfig.from_dict(data)

    async def save_config(self, config: ScheduleConfig) -> None:
        await self.store.set(CONFIG_KEY, config.to_dict())

    async def read_daily_state(self, now: datetime) -> DailyState:
        record = await self.store.get(DAILY_STATE_KEY)
        state, reset = get_or_reset_daily_state(record, today_key(now))
        if reset:
            logger.debug(f"Starting daily state for {state.date}")
            await self.store.set(DAILY_STATE_KEY, state.to_dict())
        return state

    async def record_commit(self, now: datetime, slot: Optional[str] = None) -> DailyState:
        state = await self.read_daily_state(now)
        state.count += 1
        if slot:
            state.fired_slots.add(slot)
        await self.store.set(DAILY_STATE_KEY, state.to_dict())
        return state

    async def get_last_commit(self) -> Optional[LastCommitInfo]:
        data = await self.store.get(LAST_COMMIT_KEY)
        if not data:
            return None
        return LastCommitInfo(sha=data["sha"], date=data["date"])

    async def set_last_commit(self, result: CommitResult) -> None:
        await self.store.set(LAST_COMMIT_KEY, LastCommitInfo.from_result(result).to_dict())

    async def get_error_log(self) -> List[ErrorEntry]:
        entries = await self.store.get(ERROR_LOG_KEY) or []
        return [ErrorEntry(message=e["message"], time=e["time"]) for e in entries]

    async def log_error(self, message: str, now: Optional[datetime] = None) -> None:
        """Prepend an entry to the error log, keeping the newest entries only."""
        entry = ErrorEntry(message=message, time=(now or datetime.now()).isoformat())
        entries = await self.store.get(ERROR_LOG_KEY) or []
        entries.insert(0, entry.to_dict())
        await self.store.set(ERROR_LOG_KEY, entries[:ERROR_LOG_CAPACITY])
