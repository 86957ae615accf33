import pytest

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
    parse_goal,
    reduce,
)


def run(session, *events, offset=0):
    effects = []
    for e in events:
        session, eff = reduce(session, e, calibration_offset_ms=offset)
        effects.extend(eff)
    return session, effects


def calibrated(duration_ms=2000, goal=10):
    s, _ = run(new_session(goal), CalibrationStart(now_ms=0), CalibrationStop(now_ms=duration_ms))
    return s


@pytest.mark.parametrize("raw, expected", [
    ("12", 12),
    (" 7 ", 7),
    (3, 3),
    (4.9, 4),
    ("abc", 0),
    ("", 0),
    (None, 0),
    ("0", 0),
    ("-5", 0),
    (-2, 0),
    (True, 0),
])
def test_parse_goal(raw, expected):
    assert parse_goal(raw) == expected


def test_new_session_defaults():
    s = new_session(10)
    assert s == RoundSession(goal_rounds=10)
    assert s.calibration_state == CalibrationState.IDLE
    assert s.round_duration_ms is None
    assert not s.goal_reached


def test_calibration_sets_duration_and_counts_first_round():
    s, effects = run(new_session(10), CalibrationStart(now_ms=500), CalibrationStop(now_ms=2500))
    assert s.calibration_state == CalibrationState.CALIBRATED
    assert s.round_duration_ms == 2000
    assert s.round_count == 1
    assert effects == [Effect.UNLOCK_AUDIO]


def test_calibration_offset_is_added():
    s, _ = run(new_session(10), CalibrationStart(now_ms=0), CalibrationStop(now_ms=1500), offset=10_000)
    assert s.round_duration_ms == 11_500


def test_zero_length_calibration_is_accepted():
    s, _ = run(new_session(10), CalibrationStart(now_ms=42), CalibrationStop(now_ms=42))
    assert s.round_duration_ms == 0
    assert s.calibration_state == CalibrationState.CALIBRATED


def test_stop_without_start_is_noop():
    s0 = new_session(10)
    s, effects = reduce(s0, CalibrationStop(now_ms=100))
    assert s is s0
    assert effects == []


def test_double_start_keeps_first_timestamp():
    s, _ = run(new_session(10), CalibrationStart(now_ms=0), CalibrationStart(now_ms=900), CalibrationStop(now_ms=1000))
    assert s.round_duration_ms == 1000


def test_start_counting_requires_calibration():
    s0 = new_session(10)
    s, effects = reduce(s0, StartCounting())
    assert s is s0 and effects == []


def test_start_counting_twice_is_noop():
    s, effects = run(calibrated(), StartCounting(), StartCounting())
    assert s.counting
    assert effects == [Effect.START_TIMER]


def test_ticks_increment_until_goal_then_stop():
    s, effects = run(calibrated(goal=4), StartCounting(), Tick(), Tick())
    assert s.round_count == 3
    assert s.counting
    assert effects == [Effect.START_TIMER]

    s, effects = run(s, Tick())
    assert s.round_count == 4
    assert s.goal_reached
    assert not s.counting
    assert effects == [Effect.STOP_TIMER, Effect.NOTIFY_GOAL]

    # stale ticks after auto-stop change nothing
    s2, effects = run(s, Tick(), Tick())
    assert s2 == s
    assert effects == []


def test_scenario_two_second_rounds_goal_three():
    s = calibrated(duration_ms=2000)
    s, _ = run(s, SetGoal(3), StartCounting())
    s, effects = run(s, Tick(), Tick())
    assert s.round_duration_ms == 2000
    assert s.round_count == 3
    assert s.goal_reached
    assert not s.counting
    assert effects.count(Effect.NOTIFY_GOAL) == 1
    assert Effect.STOP_TIMER in effects


def test_lowering_goal_while_idle_reaches_immediately():
    s = calibrated(goal=10)
    assert not s.goal_reached
    s, effects = run(s, SetGoal(1))
    assert s.goal_reached
    assert effects == [Effect.NOTIFY_GOAL]


def test_lowering_goal_while_counting_stops_timer():
    s, _ = run(calibrated(goal=10), StartCounting(), Tick(), Tick())
    s, effects = run(s, SetGoal(2))
    assert s.goal_reached
    assert not s.counting
    assert effects == [Effect.STOP_TIMER, Effect.NOTIFY_GOAL]


def test_notification_once_per_transition():
    s, _ = run(calibrated(goal=10), SetGoal(1))
    s, effects = run(s, SetGoal(1), SetGoal("1"))
    assert effects == []
    # false again, then true again -> one more notification
    s, effects = run(s, SetGoal(5), SetGoal(1))
    assert effects == [Effect.NOTIFY_GOAL]


def test_non_numeric_goal_is_never_reached():
    s, _ = run(calibrated(goal=10), SetGoal("abc"), StartCounting())
    assert s.goal_rounds == 0
    for _ in range(25):
        s, effects = reduce(s, Tick())
        assert Effect.NOTIFY_GOAL not in effects
    assert s.round_count == 26
    assert not s.goal_reached
    assert s.counting

    s, effects = run(s, SetGoal(20))
    assert s.goal_reached
    assert effects == [Effect.STOP_TIMER, Effect.NOTIFY_GOAL]


def test_start_counting_refused_when_goal_already_reached():
    s, _ = run(calibrated(goal=1))
    assert s.goal_reached
    s2, effects = reduce(s, StartCounting())
    assert s2 is s and effects == []


@pytest.mark.parametrize("events", [
    [],
    [CalibrationStart(now_ms=0)],
    [CalibrationStart(now_ms=0), CalibrationStop(now_ms=800)],
    [CalibrationStart(now_ms=0), CalibrationStop(now_ms=800), StartCounting(), Tick()],
    [CalibrationStart(now_ms=0), CalibrationStop(now_ms=800), SetGoal(2), StartCounting(), Tick()],
])
def test_reset_from_any_state(events):
    s, _ = run(new_session(10), *events)
    was_counting = s.counting
    s, effects = reduce(s, Reset(default_goal=10))
    assert s == new_session(10)
    assert s.round_count == 0
    assert s.calibration_state == CalibrationState.IDLE
    assert s.round_duration_ms is None
    assert not s.goal_reached
    assert effects == ([Effect.STOP_TIMER] if was_counting else [])


def test_recalibration_stops_counting_and_clears_duration():
    s, _ = run(calibrated(goal=10), StartCounting(), Tick())
    s, effects = reduce(s, CalibrationStart(now_ms=5000))
    assert effects == [Effect.STOP_TIMER, Effect.UNLOCK_AUDIO]
    assert not s.counting
    assert s.round_duration_ms is None
    assert s.calibration_state == CalibrationState.CALIBRATING

    s, _ = reduce(s, CalibrationStop(now_ms=6000))
    assert s.round_duration_ms == 1000
    assert s.round_count == 1
