"""State records kept by the scheduler between and during ticks."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Set

FORCE_SLOT = "force"


@dataclass
class CommitResult:
    """Outcome of a single commit operation."""

    sha: str
    date: datetime


@dataclass
class DailyState:
    """Commits made on a single calendar day."""

    date: str  # YYYY-MM-DD, local time
    count: int = 0
    fired_slots: Set[str] = field(default_factory=set)  # HH:MM labels plus the force marker

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DailyState":
        return cls(
            date=data["date"],
            count=int(data.get("count", 0)),
            fired_slots=set(data.get("firedSlots") or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"date": self.date, "count": self.count, "firedSlots": sorted(self.fired_slots)}


@dataclass
class LastCommitInfo:
    sha: str
    date: str  # ISO timestamp

    @classmethod
    def from_result(cls, result: CommitResult) -> "LastCommitInfo":
        return cls(sha=result.sha, date=result.date.isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return {"sha": self.sha, "date": self.date}


@dataclass
class ErrorEntry:
    message: str
    time: str  # ISO timestamp

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "time": self.time}


@dataclass
class ForceResult:
    """Result returned to whoever asked for a forced commit."""

    ok: bool
    sha: Optional[str] = None
    error: Optional[str] = None
    cooldown: Optional[int] = None  # seconds left before another force is allowed


@dataclass
class SchedulerState:
    """In-process state shared by the executor guard and the force path.

    Nothing here is persisted, a restart clears both the lock and the cooldown.
    """

    commit_in_flight: bool = False
    last_force_at: Optional[float] = None  # monotonic seconds of the last successful force
