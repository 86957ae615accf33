import pytest

from roundcounter.core.round_state import CalibrationState
from roundcounter.core.round_timer import RoundTimer


@pytest.fixture
def timer(qapp, clock):
    t = RoundTimer(default_goal=10, clock=clock)
    yield t
    t.reset()


def calibrate(timer, clock, ms):
    timer.start_calibration()
    clock.advance(ms)
    timer.stop_calibration()


def test_calibration_duration_from_clock(timer, clock):
    calibrate(timer, clock, 2000)
    assert timer.round_duration_ms == 2000
    assert timer.round_count == 1
    assert timer.calibration_state == CalibrationState.CALIBRATED
    assert not timer.timer_active()


def test_calibration_offset(qapp, clock):
    t = RoundTimer(default_goal=10, calibration_offset_ms=10_000, clock=clock)
    calibrate(t, clock, 1500)
    assert t.round_duration_ms == 11_500


def test_toggle_calibration(timer, clock):
    timer.toggle_calibration()
    assert timer.calibration_state == CalibrationState.CALIBRATING
    clock.advance(750)
    timer.toggle_calibration()
    assert timer.round_duration_ms == 750


def test_audio_unlock_on_calibration_start(timer, qtbot):
    with qtbot.waitSignal(timer.audio_unlock, timeout=500):
        timer.start_calibration()


def test_start_counting_arms_single_timer(timer, clock):
    calibrate(timer, clock, 2000)
    timer.start_counting()
    assert timer.counting
    assert timer.timer_active()
    assert timer._timer.interval() == 2000

    timer.start_counting()
    assert timer.timer_active()


def test_scenario_goal_three(timer, clock, qtbot):
    calibrate(timer, clock, 2000)
    timer.set_goal("3")
    timer.start_counting()

    notifications = []
    timer.reached.connect(notifications.append)

    timer._on_tick()
    assert timer.round_count == 2
    assert timer.timer_active()

    timer._on_tick()
    assert timer.round_count == 3
    assert timer.goal_reached
    assert not timer.counting
    assert not timer.timer_active()
    assert notifications == [3]

    # a tick already queued before the stop is ignored
    timer._on_tick()
    assert timer.round_count == 3
    assert notifications == [3]


def test_reset_cancels_timer(timer, clock):
    calibrate(timer, clock, 2000)
    timer.set_goal(50)
    timer.start_counting()
    timer._on_tick()
    assert timer.timer_active()

    timer.reset()
    assert not timer.timer_active()
    assert timer.round_count == 0
    assert timer.goal_rounds == 10
    assert timer.calibration_state == CalibrationState.IDLE
    assert timer.round_duration_ms is None
    assert not timer.goal_reached


def test_goal_lowered_while_idle(timer, clock):
    calibrate(timer, clock, 1000)
    seen = []
    timer.reached.connect(seen.append)
    timer.set_goal(1)
    assert timer.goal_reached
    assert seen == [1]


def test_invalid_goal_normalizes(timer):
    timer.set_goal("abc")
    assert timer.goal_rounds == 0
    assert not timer.goal_reached


def test_changed_emitted_only_on_state_change(timer, clock):
    changes = []
    timer.changed.connect(lambda: changes.append(1))
    timer.stop_calibration()     # out of sequence
    timer.start_counting()       # out of sequence
    assert changes == []
    timer.start_calibration()
    assert changes == [1]


def test_real_timer_counts_to_goal(qtbot):
    t = RoundTimer(default_goal=4)
    t.start_calibration()
    qtbot.wait(25)
    t.stop_calibration()
    assert t.round_duration_ms >= 20

    with qtbot.waitSignal(t.reached, timeout=5000) as blocker:
        t.start_counting()

    assert blocker.args == [4]
    assert t.round_count == 4
    assert not t.timer_active()

    qtbot.wait(3 * t.round_duration_ms)
    assert t.round_count == 4
