"""Tick dispatcher, the entry point called by the periodic alarm."""

from datetime import datetime
from typing import Dict, Optional

from loguru import logger

from ghostcommits.models.config import MODE_FIXED, MODE_RANDOM
from ghostcommits.models.state import CommitResult
from ghostcommits.policies.base import Policy
from ghostcommits.storage import Storage


class TickDispatcher:
    """Loads the config, picks a policy and contains every failure of a tick.

    ``tick`` never raises: an exception escaping here would take the alarm loop
    down with it.
    """

    def __init__(self, storage: Storage, policies: Dict[str, Policy]):
        if MODE_RANDOM not in policies:
            raise ValueError("a random mode policy is required as the default")
        self.storage = storage
        self.policies = policies

    def select_policy(self, mode: Optional[str]) -> Policy:
        return self.policies.get(mode or MODE_RANDOM, self.policies[MODE_RANDOM])

    async def tick(self, now: Optional[datetime] = None) -> Optional[CommitResult]:
        now = now or datetime.now()
        try:
            config = await self.storage.load_config()
            if not config or not config.enabled:
                logger.debug("Scheduler disabled or not configured, skipping tick")
                return None

            policy = self.select_policy(config.schedule_mode)
            if config.schedule_mode not in (MODE_RANDOM, MODE_FIXED):
                logger.warning(f"Unknown schedule mode {config.schedule_mode!r}, using random")
            return await policy.maybe_commit(config, now)

        except Exception as e:
            message = str(e) or e.__class__.__name__
            logger.error(f"Tick failed: {message}")
            try:
                await self.storage.log_error(message, now)
            except Exception as log_error:
                logger.error(f"Could not record tick failure: {str(log_error)}")
            return None
