import pytest
from PySide6.QtCore import Qt

from roundcounter.core.round_state import CalibrationState
from roundcounter.core.round_timer import RoundTimer
from roundcounter.ui.counter_screen import CounterScreen, format_round_time


@pytest.fixture
def screen(qtbot, clock):
    timer = RoundTimer(default_goal=10, clock=clock)
    w = CounterScreen(timer)
    qtbot.addWidget(w)
    w.show()
    yield w
    timer.reset()


def test_format_round_time():
    assert format_round_time(2000) == "Your time for each round: 2.00 seconds."
    assert format_round_time(1234) == "Your time for each round: 1.23 seconds."


def test_initial_view_shows_only_calibration(screen):
    assert screen.calibrate_btn.isVisible()
    assert "Start Rounds" in screen.calibrate_btn.text()
    assert not screen.count_lbl.isVisible()
    assert not screen.start_btn.isVisible()
    assert screen.reset_btn.isVisible()


def test_calibrate_via_button(screen, qtbot, clock):
    qtbot.mouseClick(screen.calibrate_btn, Qt.LeftButton)
    assert screen.timer.calibration_state == CalibrationState.CALIBRATING
    assert "Stop Rounds" in screen.calibrate_btn.text()

    clock.advance(2000)
    qtbot.mouseClick(screen.calibrate_btn, Qt.LeftButton)

    assert not screen.calibrate_btn.isVisible()
    assert screen.count_lbl.text() == "1"
    assert screen.round_time_lbl.text() == "Your time for each round: 2.00 seconds."
    assert screen.start_btn.isEnabled()
    assert not screen.goal_card.isVisible()


def test_goal_input_and_counting(screen, qtbot, clock):
    t = screen.timer
    t.start_calibration()
    clock.advance(1000)
    t.stop_calibration()

    screen.goal_edit.setText("3")
    assert t.goal_rounds == 3

    qtbot.mouseClick(screen.start_btn, Qt.LeftButton)
    assert t.counting
    assert not screen.goal_edit.isEnabled()
    assert not screen.start_btn.isEnabled()

    t._on_tick()
    t._on_tick()
    assert screen.count_lbl.text() == "3"
    assert screen.goal_card.isVisible()
    assert screen.goal_edit.isEnabled()
    assert not screen.start_btn.isEnabled()


def test_non_numeric_goal_text_is_kept(screen):
    screen.goal_edit.setText("abc")
    assert screen.timer.goal_rounds == 0
    assert screen.goal_edit.text() == "abc"


def test_reset_restores_default_goal_text(screen, qtbot, clock):
    screen.goal_edit.setText("5")
    qtbot.mouseClick(screen.reset_btn, Qt.LeftButton)
    assert screen.goal_edit.text() == "10"
    assert screen.calibrate_btn.isVisible()


def test_reset_with_zero_default_goal_clears_text(qtbot, clock):
    timer = RoundTimer(default_goal=0, clock=clock)
    w = CounterScreen(timer)
    qtbot.addWidget(w)
    w.show()
    assert w.goal_edit.text() == ""

    w.goal_edit.setText("5")
    assert timer.goal_rounds == 5

    qtbot.mouseClick(w.reset_btn, Qt.LeftButton)
    assert timer.goal_rounds == 0
    assert w.goal_edit.text() == ""


def test_visitor_badge(screen):
    screen.set_visitor_count(1234)
    assert screen.visitor_lbl.isVisible()
    assert "1,234" in screen.visitor_lbl.text()
    screen.set_visitor_count(0)
    assert not screen.visitor_lbl.isVisible()
