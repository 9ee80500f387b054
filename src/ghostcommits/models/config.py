"""Schedule configuration as stored by the surrounding application."""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ghostcommits.errors import InvalidConfigError

MIN_COMMITS_PER_DAY = 1
MAX_COMMITS_PER_DAY = 20
DEFAULT_COMMITS_PER_DAY = 3

MODE_RANDOM = "random"
MODE_FIXED = "fixed"

_SLOT_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


def clamp(value: int, low: int, high: int) -> int:
    return min(high, max(low, value))


def parse_slot(slot: str) -> int:
    """Return the minutes since midnight for an "HH:MM" slot."""
    match = _SLOT_PATTERN.match(slot.strip()) if isinstance(slot, str) else None
    if not match:
        raise InvalidConfigError(f"Invalid fixed time {slot!r}, expected HH:MM")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise InvalidConfigError(f"Invalid fixed time {slot!r}, out of range")
    return hours * 60 + minutes


def normalize_slot(slot: str) -> str:
    """Normalize "9:00" to "09:00"."""
    minutes = parse_slot(slot)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


@dataclass
class ScheduleConfig:
    """User configuration read by the scheduler.

    The credential and target fields are opaque to the scheduling logic and are
    only handed through to the committer.
    """

    enabled: bool = False
    schedule_mode: str = MODE_RANDOM
    commits_per_day: int = DEFAULT_COMMITS_PER_DAY
    fixed_times: List[str] = field(default_factory=list)

    # Commit identity
    email: str = ""
    author_name: str = ""

    # Target repository
    repo_path: str = ""
    token: Optional[str] = None
    owner: Optional[str] = None
    repo: Optional[str] = None
    html_url: Optional[str] = None
    remote: str = "origin"
    branch: str = "main"
    push: bool = False

    def __post_init__(self):
        self.commits_per_day = clamp(int(self.commits_per_day), MIN_COMMITS_PER_DAY, MAX_COMMITS_PER_DAY)
        self.fixed_times = [normalize_slot(slot) for slot in self.fixed_times]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScheduleConfig":
        """Build a config from its stored camelCase representation."""
        raw_commits = data.get("commitsPerDay")
        try:
            commits_per_day = DEFAULT_COMMITS_PER_DAY if raw_commits is None else int(raw_commits)
        except (TypeError, ValueError) as e:
            raise InvalidConfigError(f"Invalid commitsPerDay: {raw_commits!r}") from e

        fixed_times = data.get("fixedTimes") or []
        if not isinstance(fixed_times, list):
            raise InvalidConfigError("fixedTimes must be a list of HH:MM strings")

        return cls(
            enabled=bool(data.get("enabled", False)),
            schedule_mode=data.get("scheduleMode") or MODE_RANDOM,
            commits_per_day=commits_per_day,
            fixed_times=fixed_times,
            email=data.get("email", ""),
            author_name=data.get("authorName", ""),
            repo_path=data.get("repoPath", ""),
            token=data.get("token"),
            owner=data.get("owner"),
            repo=data.get("repo"),
            html_url=data.get("htmlUrl"),
            remote=data.get("remote") or "origin",
            branch=data.get("branch") or "main",
            push=bool(data.get("push", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "scheduleMode": self.schedule_mode,
            "commitsPerDay": self.commits_per_day,
            "fixedTimes": list(self.fixed_times),
            "email": self.email,
            "authorName": self.author_name,
            "repoPath": self.repo_path,
            "token": self.token,
            "owner": self.owner,
            "repo": self.repo,
            "htmlUrl": self.html_url,
            "remote": self.remote,
            "branch": self.branch,
            "push": self.push,
        }
