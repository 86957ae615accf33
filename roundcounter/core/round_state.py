# roundcounter/core/round_state.py
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Tuple, Union


class CalibrationState(str, Enum):
    IDLE = "idle"
    CALIBRATING = "calibrating"
    CALIBRATED = "calibrated"


class Effect(str, Enum):
    START_TIMER = "start_timer"
    STOP_TIMER = "stop_timer"
    NOTIFY_GOAL = "notify_goal"
    UNLOCK_AUDIO = "unlock_audio"


@dataclass(frozen=True)
class RoundSession:
    round_count: int = 0
    goal_rounds: int = 0
    calibration_state: CalibrationState = CalibrationState.IDLE
    round_duration_ms: Optional[int] = None
    calibration_started_ms: Optional[float] = None
    counting: bool = False

    @property
    def goal_reached(self) -> bool:
        # goal 0 means "no goal yet" and is never reached
        return (
            self.round_count > 0
            and self.goal_rounds > 0
            and self.round_count >= self.goal_rounds
        )


# ---- Events


@dataclass(frozen=True)
class CalibrationStart:
    now_ms: float


@dataclass(frozen=True)
class CalibrationStop:
    now_ms: float


@dataclass(frozen=True)
class SetGoal:
    value: object


@dataclass(frozen=True)
class StartCounting:
    pass


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class Reset:
    default_goal: int = 0


Event = Union[CalibrationStart, CalibrationStop, SetGoal, StartCounting, Tick, Reset]


def parse_goal(value) -> int:
    """
    Normalize user goal input to a positive int, or 0 when unusable.
    Accepts ints and numeric strings ("12", " 7 "). Floats are truncated.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        n = value
    elif isinstance(value, float):
        n = int(value)
    else:
        text = str(value or "").strip()
        try:
            n = int(text, 10)
        except ValueError:
            return 0
    return n if n > 0 else 0


def new_session(default_goal: int = 0) -> RoundSession:
    return RoundSession(goal_rounds=parse_goal(default_goal))


def reduce(
    session: RoundSession,
    event: Event,
    calibration_offset_ms: int = 0,
) -> Tuple[RoundSession, List[Effect]]:
    """
    Apply one event to the session.

    Returns the new session and the effects the owner must carry out, in order.
    Out-of-sequence events return the session unchanged with no effects.
    A false->true change of goal_reached always stops counting (if active)
    and yields exactly one NOTIFY_GOAL.
    """
    was_reached = session.goal_reached
    effects: List[Effect] = []
    s = session

    if isinstance(event, CalibrationStart):
        if s.calibration_state == CalibrationState.CALIBRATING:
            return session, []
        if s.counting:
            effects.append(Effect.STOP_TIMER)
        s = replace(
            s,
            calibration_state=CalibrationState.CALIBRATING,
            calibration_started_ms=float(event.now_ms),
            round_duration_ms=None,
            counting=False,
        )
        effects.append(Effect.UNLOCK_AUDIO)

    elif isinstance(event, CalibrationStop):
        if s.calibration_state != CalibrationState.CALIBRATING or s.calibration_started_ms is None:
            return session, []
        elapsed = max(0, int(round(event.now_ms - s.calibration_started_ms)))
        s = replace(
            s,
            calibration_state=CalibrationState.CALIBRATED,
            calibration_started_ms=None,
            round_duration_ms=elapsed + max(0, int(calibration_offset_ms)),
            round_count=1,  # the calibration round counts
        )

    elif isinstance(event, SetGoal):
        s = replace(s, goal_rounds=parse_goal(event.value))

    elif isinstance(event, StartCounting):
        if (
            s.calibration_state != CalibrationState.CALIBRATED
            or s.counting
            or s.goal_reached
            or s.round_duration_ms is None
        ):
            return session, []
        s = replace(s, counting=True)
        effects.append(Effect.START_TIMER)

    elif isinstance(event, Tick):
        if not s.counting:
            return session, []
        s = replace(s, round_count=s.round_count + 1)

    elif isinstance(event, Reset):
        if s.counting:
            effects.append(Effect.STOP_TIMER)
        return new_session(event.default_goal), effects

    else:
        return session, []

    if s.goal_reached and not was_reached:
        if s.counting:
            s = replace(s, counting=False)
            effects.append(Effect.STOP_TIMER)
        effects.append(Effect.NOTIFY_GOAL)

    return s, effects
