# roundcounter/core/round_timer.py
import logging
import time
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer, Qt, Signal

from roundcounter.core.round_state import (
    CalibrationStart,
    CalibrationState,
    CalibrationStop,
    Effect,
    Reset,
    RoundSession,
    SetGoal,
    StartCounting,
    Tick,
    new_session,
    reduce,
)

logger = logging.getLogger(__name__)


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class RoundTimer(QObject):
    """
    Owns the live round session and its single repeating QTimer.

    - start_calibration / stop_calibration derive the round duration
    - start_counting ticks once per round duration
    - counting stops by itself when the goal is reached (reached emitted once)
    - reset cancels the timer and restores defaults

    Out-of-sequence calls are ignored.
    """

    changed = Signal()
    reached = Signal(int)           # round count at the moment the goal was hit
    audio_unlock = Signal()         # emitted on calibration start (user gesture)

    def __init__(
        self,
        default_goal: int = 10,
        calibration_offset_ms: int = 0,
        clock: Optional[Callable[[], float]] = None,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self.default_goal = int(default_goal)
        self.calibration_offset_ms = int(calibration_offset_ms)
        self._clock = clock or _monotonic_ms

        self._session = new_session(self.default_goal)

        self._timer = QTimer(self)
        self._timer.setTimerType(Qt.PreciseTimer)
        self._timer.timeout.connect(self._on_tick)

    # -----------------------
    # Read-only state
    # -----------------------

    @property
    def session(self) -> RoundSession:
        return self._session

    @property
    def round_count(self) -> int:
        return self._session.round_count

    @property
    def goal_rounds(self) -> int:
        return self._session.goal_rounds

    @property
    def calibration_state(self) -> CalibrationState:
        return self._session.calibration_state

    @property
    def round_duration_ms(self) -> Optional[int]:
        return self._session.round_duration_ms

    @property
    def counting(self) -> bool:
        return self._session.counting

    @property
    def goal_reached(self) -> bool:
        return self._session.goal_reached

    def timer_active(self) -> bool:
        return self._timer.isActive()

    # -----------------------
    # Operations
    # -----------------------

    def start_calibration(self):
        self._dispatch(CalibrationStart(now_ms=self._clock()))

    def stop_calibration(self):
        self._dispatch(CalibrationStop(now_ms=self._clock()))

    def toggle_calibration(self):
        if self._session.calibration_state == CalibrationState.CALIBRATING:
            self.stop_calibration()
        else:
            self.start_calibration()

    def set_goal(self, value):
        self._dispatch(SetGoal(value))

    def start_counting(self):
        self._dispatch(StartCounting())

    def reset(self):
        self._dispatch(Reset(default_goal=self.default_goal))

    def _on_tick(self):
        self._dispatch(Tick())

    # -----------------------
    # Reducer plumbing
    # -----------------------

    def _dispatch(self, event):
        before = self._session
        after, effects = reduce(before, event, calibration_offset_ms=self.calibration_offset_ms)
        self._session = after

        for effect in effects:
            self._apply(effect)

        if after != before:
            logger.debug("%s -> %s", type(event).__name__, after)
            self.changed.emit()

    def _apply(self, effect: Effect):
        if effect == Effect.STOP_TIMER:
            self._timer.stop()
        elif effect == Effect.START_TIMER:
            # zero-length calibrations are kept as-is; QTimer(0) would spin
            self._timer.setInterval(max(1, int(self._session.round_duration_ms or 0)))
            self._timer.start()
        elif effect == Effect.NOTIFY_GOAL:
            logger.info("Goal reached: %d/%d rounds", self._session.round_count, self._session.goal_rounds)
            self.reached.emit(self._session.round_count)
        elif effect == Effect.UNLOCK_AUDIO:
            self.audio_unlock.emit()
