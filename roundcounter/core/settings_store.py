import json
import logging
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QStandardPaths

logger = logging.getLogger(__name__)

GOAL_ACTIONS = ("speech", "clip", "tone", "none")
VISITOR_BACKENDS = ("local", "firestore", "off")


def data_dir() -> Path:
    """
    Base directory for settings, cue cache, logs and the local counter.
    ROUNDCOUNTER_DATA_DIR wins over the Qt app data location.
    """
    override = os.getenv("ROUNDCOUNTER_DATA_DIR")
    if override:
        base = Path(override)
    else:
        base = Path(QStandardPaths.writableLocation(QStandardPaths.AppDataLocation))
    base.mkdir(parents=True, exist_ok=True)
    return base


@dataclass
class AppSettings:
    default_goal: int = 10
    calibration_offset_ms: int = 0

    goal_action: str = "speech"
    goal_phrase: str = "Jai hanuman your goal is reached"
    cue_repeats: int = 3

    voice_locale: str = "co.uk"
    voice_gender: str = "Female"
    tone_hz: int = 880
    tone_ms: int = 600

    visitor_backend: str = "local"
    firestore_project: str = ""

    def normalized(self) -> "AppSettings":
        s = AppSettings(**asdict(self))
        s.default_goal = max(0, int(s.default_goal))
        s.calibration_offset_ms = max(0, int(s.calibration_offset_ms))
        s.cue_repeats = max(1, int(s.cue_repeats))
        s.tone_hz = max(50, min(8000, int(s.tone_hz)))
        s.tone_ms = max(50, min(5000, int(s.tone_ms)))
        if s.goal_action not in GOAL_ACTIONS:
            s.goal_action = "speech"
        if s.visitor_backend not in VISITOR_BACKENDS:
            s.visitor_backend = "local"
        return s


class SettingsStore:
    def __init__(self, path: Optional[Path] = None):
        self.path = path or (data_dir() / "settings.json")

    def load(self) -> AppSettings:
        s = AppSettings()
        if self.path.exists():
            try:
                data = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                logger.warning("Could not read settings %s: %r", self.path, e)
                data = {}
            if isinstance(data, dict):
                for k, v in data.items():
                    if hasattr(s, k):
                        setattr(s, k, v)

        backend = os.getenv("ROUNDCOUNTER_VISITOR_BACKEND")
        if backend:
            s.visitor_backend = backend.strip().lower()

        try:
            return s.normalized()
        except (TypeError, ValueError) as e:
            logger.warning("Invalid settings in %s, using defaults: %r", self.path, e)
            return AppSettings()

    def save(self, settings: AppSettings) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(asdict(settings.normalized()), indent=2), encoding="utf-8")
