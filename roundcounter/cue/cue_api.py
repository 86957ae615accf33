# roundcounter/cue/cue_api.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

from roundcounter.core.settings_store import data_dir


class CueError(RuntimeError):
    """A notification cue could not be generated or played."""


def cue_cache_dir(base: Optional[Path] = None) -> Path:
    p = Path(base) if base else data_dir() / "cue_cache"
    p.mkdir(parents=True, exist_ok=True)
    return p


class RepeatCounter:
    """
    "Play exactly N times, one after the other."
    take() is called before each playback; it returns False once N are used up.
    """

    def __init__(self, times: int):
        self.times = max(0, int(times))
        self.played = 0

    @property
    def remaining(self) -> int:
        return self.times - self.played

    def take(self) -> bool:
        if self.played >= self.times:
            return False
        self.played += 1
        return True

    def cancel(self):
        self.played = self.times
