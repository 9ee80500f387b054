"""Fixed mode: one commit per configured HH:MM slot per day."""

from datetime import datetime
from typing import Optional

from loguru import logger

from ghostcommits.models.config import ScheduleConfig, parse_slot
from ghostcommits.models.state import CommitResult
from ghostcommits.policies.base import Policy, commit_and_record


def minutes_since_midnight(now: datetime) -> int:
    return now.hour * 60 + now.minute


class FixedPolicy(Policy):
    """Fires a slot during the single tick interval that follows its time.

    A slot is due while ``slot <= now < slot + tick_interval``, and once fired it
    is recorded in the day's fired slots so repeated ticks inside the same
    interval do not fire it again.

    The interval does not wrap past midnight: with 5 minute ticks a "23:58" slot
    is only due at 23:58 and 23:59, so ticks must be aligned to catch it.
    """

    def is_due(self, slot: str, now: datetime) -> bool:
        slot_minutes = parse_slot(slot)
        return slot_minutes <= minutes_since_midnight(now) < slot_minutes + self.tick_interval_minutes

    async def maybe_commit(self, config: ScheduleConfig, now: datetime) -> Optional[CommitResult]:
        last_result = None
        for slot in config.fixed_times:
            state = await self.storage.read_daily_state(now)
            if slot in state.fired_slots:
                continue
            if not self.is_due(slot, now):
                continue

            logger.debug(f"Slot {slot} is due at {now:%H:%M}")
            last_result, _ = await commit_and_record(self.executor, self.storage, config, now, slot)
        return last_result
