"""Commands accepted from the interactive surface."""

from dataclasses import dataclass
from typing import Optional, Union

from ghostcommits.models.state import ForceResult


@dataclass(frozen=True)
class Start:
    """Make sure the periodic alarm is running."""


@dataclass(frozen=True)
class Stop:
    """Remove the periodic alarm."""


@dataclass(frozen=True)
class ForceCommit:
    """Commit now, bypassing the policies."""


@dataclass(frozen=True)
class ScheduleUpdated:
    """The stored configuration changed; re-register the alarm to match it."""


Command = Union[Start, Stop, ForceCommit, ScheduleUpdated]


@dataclass
class CommandResult:
    ok: bool
    force: Optional[ForceResult] = None
