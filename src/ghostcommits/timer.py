"""Named periodic alarms running on the asyncio event loop."""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Dict, Optional

from loguru import logger

AlarmCallback = Callable[[], Awaitable[None]]


@dataclass
class AlarmInfo:
    name: str
    period_minutes: float
    scheduled_time: datetime  # next time the alarm fires


@dataclass
class _Alarm:
    info: AlarmInfo
    task: Optional[asyncio.Task] = None
    running: Optional[asyncio.Future] = None  # callback currently in progress


class AlarmScheduler:
    """Registers, clears and inspects periodic wake-ups.

    Alarms fire at a fixed rate: a slow callback delays the next run but does
    not shift later ones. A callback that raises is logged and the alarm keeps
    running. Clearing an alarm stops future runs only; a callback already in
    progress is allowed to finish.
    """

    def __init__(self):
        self._alarms: Dict[str, _Alarm] = {}

    def create(self, name: str, period_minutes: float, delay_minutes: float, callback: AlarmCallback) -> AlarmInfo:
        """Register an alarm, replacing any existing alarm with the same name."""
        if period_minutes <= 0:
            raise ValueError("period_minutes must be positive")
        self._cancel(name)

        alarm = _Alarm(
            info=AlarmInfo(
                name=name,
                period_minutes=period_minutes,
                scheduled_time=datetime.now() + timedelta(minutes=delay_minutes),
            )
        )
        alarm.task = asyncio.get_running_loop().create_task(
            self._run(alarm, delay_minutes, callback), name=f"alarm:{name}"
        )
        self._alarms[name] = alarm
        logger.info(f"Alarm {name} created, every {period_minutes} min")
        return alarm.info

    def get(self, name: str) -> Optional[AlarmInfo]:
        alarm = self._alarms.get(name)
        return alarm.info if alarm else None

    async def clear(self, name: str) -> bool:
        """Stop an alarm and wait for a callback it is still running."""
        alarm = self._alarms.pop(name, None)
        if not alarm:
            return False
        alarm.task.cancel()
        try:
            await alarm.task
        except asyncio.CancelledError:
            pass

        if alarm.running is not None and not alarm.running.done():
            logger.debug(f"Waiting for running {name} callback to finish")
            try:
                await alarm.running
            except Exception as e:
                logger.exception(f"Alarm {name} callback failed: {str(e)}")
        logger.info(f"Alarm {name} cleared")
        return True

    async def clear_all(self) -> None:
        for name in list(self._alarms):
            await self.clear(name)

    def _cancel(self, name: str) -> None:
        alarm = self._alarms.pop(name, None)
        if alarm:
            alarm.task.cancel()

    async def _run(self, alarm: _Alarm, delay_minutes: float, callback: AlarmCallback) -> None:
        loop = asyncio.get_running_loop()
        info = alarm.info
        period = info.period_minutes * 60
        next_fire = loop.time() + delay_minutes * 60

        while True:
            await asyncio.sleep(max(0.0, next_fire - loop.time()))
            next_fire += period
            # Skip runs missed while the callback or the machine was stalled
            while next_fire <= loop.time():
                next_fire += period
            info.scheduled_time = datetime.now() + timedelta(seconds=next_fire - loop.time())

            # Shielded so cancelling the alarm never interrupts a commit half way
            alarm.running = asyncio.ensure_future(callback())
            try:
                await asyncio.shield(alarm.running)
            except Exception as e:
                logger.exception(f"Alarm {info.name} callback failed: {str(e)}")
