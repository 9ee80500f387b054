"""Runtime settings read from the environment."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

DEFAULT_STATE_FILE = Path.home() / ".ghost-commits" / "state.json"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


@dataclass
class Settings:
    """Scheduler tuning. Defaults match a 5 minute tick over 06:00-22:00."""

    state_file: Path = DEFAULT_STATE_FILE
    tick_interval_minutes: int = 5
    first_tick_delay_minutes: int = 1
    window_start_hour: int = 6
    window_end_hour: int = 22
    force_window_hours: int = 1
    force_cooldown_seconds: float = 4.0
    force_retry_delay_seconds: float = 2.0
    token: Optional[str] = None

    def __post_init__(self):
        if self.tick_interval_minutes < 1:
            raise ValueError("tick_interval_minutes must be at least 1")
        if not 0 <= self.window_start_hour < self.window_end_hour <= 24:
            raise ValueError("commit window must satisfy 0 <= start < end <= 24")
        if not 0 <= self.force_window_hours <= self.window_end_hour - self.window_start_hour:
            raise ValueError("force_window_hours must fit inside the commit window")

    @property
    def window_minutes(self) -> int:
        return (self.window_end_hour - self.window_start_hour) * 60


def load_settings() -> Settings:
    """Build settings from GHOST_COMMITS_* environment variables.

    Call ``load_dotenv()`` first to pick up a local .env file.
    """
    state_file = os.getenv("GHOST_COMMITS_STATE_FILE")
    return Settings(
        state_file=Path(state_file).expanduser() if state_file else DEFAULT_STATE_FILE,
        tick_interval_minutes=_int_env("GHOST_COMMITS_TICK_MINUTES", 5),
        window_start_hour=_int_env("GHOST_COMMITS_WINDOW_START", 6),
        window_end_hour=_int_env("GHOST_COMMITS_WINDOW_END", 22),
        force_cooldown_seconds=_float_env("GHOST_COMMITS_FORCE_COOLDOWN", 4.0),
        force_retry_delay_seconds=_float_env("GHOST_COMMITS_FORCE_RETRY_DELAY", 2.0),
        token=os.getenv("GHOST_COMMITS_TOKEN") or None,
    )
