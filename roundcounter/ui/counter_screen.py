# roundcounter/ui/counter_screen.py
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QFrame, QLineEdit
)
from PySide6.QtCore import Qt

from roundcounter.core.round_state import CalibrationState, parse_goal
from roundcounter.core.round_timer import RoundTimer
from roundcounter.ui.style import card_qss

GOAL_VERSE = (
    "“Tvamasmin Kārya Niryoge Pramānam Hari Sattama "
    "Hanuman Yatna Māsthāya Dukha Kshaya Karo Bhava”"
)


def format_round_time(duration_ms) -> str:
    return f"Your time for each round: {duration_ms / 1000:.2f} seconds."


def goal_text(goal_rounds: int) -> str:
    # 0 means "no goal yet"; leave the field empty so the placeholder shows
    return str(goal_rounds) if goal_rounds > 0 else ""


class CounterScreen(QWidget):
    """
    The round counter page. Pure view: forwards clicks/input to RoundTimer
    and re-renders whenever the timer reports a change.
    """
    def __init__(self, timer: RoundTimer):
        super().__init__()
        self.timer = timer

        root = QVBoxLayout(self)
        root.setContentsMargins(40, 28, 40, 24)
        root.setSpacing(16)
        root.setAlignment(Qt.AlignCenter)

        self.title = QLabel("“Jai Hanuman” Round Counter")
        self.title.setAlignment(Qt.AlignCenter)
        self.title.setStyleSheet("font-size: 28px; font-weight: 850;")

        self.subtitle = QLabel("")
        self.subtitle.setObjectName("muted")
        self.subtitle.setAlignment(Qt.AlignCenter)
        self.subtitle.setWordWrap(True)

        # ---- Calibration block
        self.calibrate_btn = QPushButton("")
        self.calibrate_btn.setObjectName("primary")
        self.calibrate_btn.setCursor(Qt.PointingHandCursor)
        self.calibrate_btn.setFixedWidth(240)
        self.calibrate_btn.clicked.connect(self.timer.toggle_calibration)

        # ---- Counting block
        self.rounds_caption = QLabel("Rounds Finished")
        self.rounds_caption.setObjectName("muted")
        self.rounds_caption.setAlignment(Qt.AlignCenter)

        self.count_lbl = QLabel("0")
        self.count_lbl.setObjectName("roundCount")
        self.count_lbl.setAlignment(Qt.AlignCenter)

        self.goal_caption = QLabel("Set Goal (Rounds)")
        self.goal_caption.setAlignment(Qt.AlignCenter)
        self.goal_caption.setStyleSheet("font-weight: 700;")

        self.goal_edit = QLineEdit()
        self.goal_edit.setPlaceholderText("e.g. 10")
        self.goal_edit.setAlignment(Qt.AlignCenter)
        self.goal_edit.setFixedWidth(200)
        self.goal_edit.setText(goal_text(self.timer.goal_rounds))
        self.goal_edit.textChanged.connect(self.timer.set_goal)

        self.round_time_lbl = QLabel("")
        self.round_time_lbl.setObjectName("muted")
        self.round_time_lbl.setAlignment(Qt.AlignCenter)

        self.goal_card = QFrame()
        self.goal_card.setStyleSheet(card_qss(14).replace(
            "rgba(255,255,255,0.08)", "rgba(245,158,11,0.45)"
        ))
        goal_lay = QVBoxLayout(self.goal_card)
        goal_lay.setContentsMargins(16, 12, 16, 12)
        goal_lay.setSpacing(4)
        goal_title = QLabel("🏆 Goal Reached!")
        goal_title.setAlignment(Qt.AlignCenter)
        goal_title.setStyleSheet("font-size: 16px; font-weight: 850; color: #f59e0b; border: none;")
        goal_verse = QLabel(GOAL_VERSE)
        goal_verse.setAlignment(Qt.AlignCenter)
        goal_verse.setWordWrap(True)
        goal_verse.setStyleSheet("font-size: 12px; border: none;")
        goal_lay.addWidget(goal_title)
        goal_lay.addWidget(goal_verse)

        # ---- Footer
        self.start_btn = QPushButton("▶ Start Counting")
        self.start_btn.setObjectName("primary")
        self.start_btn.setCursor(Qt.PointingHandCursor)
        self.start_btn.setFixedWidth(200)
        self.start_btn.clicked.connect(self.timer.start_counting)

        self.reset_btn = QPushButton("↻ Reset")
        self.reset_btn.setCursor(Qt.PointingHandCursor)
        self.reset_btn.setFixedWidth(200)
        self.reset_btn.clicked.connect(self.timer.reset)

        footer = QHBoxLayout()
        footer.setSpacing(14)
        footer.addStretch(1)
        footer.addWidget(self.start_btn)
        footer.addWidget(self.reset_btn)
        footer.addStretch(1)

        self.visitor_lbl = QLabel("")
        self.visitor_lbl.setObjectName("muted")
        self.visitor_lbl.setAlignment(Qt.AlignRight)
        self.visitor_lbl.hide()

        root.addWidget(self.title)
        root.addWidget(self.subtitle)
        root.addSpacing(6)
        root.addWidget(self.calibrate_btn, alignment=Qt.AlignCenter)
        root.addWidget(self.rounds_caption)
        root.addWidget(self.count_lbl)
        root.addWidget(self.goal_caption)
        root.addWidget(self.goal_edit, alignment=Qt.AlignCenter)
        root.addWidget(self.round_time_lbl)
        root.addWidget(self.goal_card)
        root.addStretch(1)
        root.addLayout(footer)
        root.addWidget(self.visitor_lbl)

        self.timer.changed.connect(self.render)
        self.render()

    def set_visitor_count(self, count: int):
        if count > 0:
            self.visitor_lbl.setText(f"👥 {count:,}")
            self.visitor_lbl.show()
        else:
            self.visitor_lbl.hide()

    def render(self):
        t = self.timer
        calibrated = t.round_duration_ms is not None
        calibrating = t.calibration_state == CalibrationState.CALIBRATING

        # calibration view
        self.calibrate_btn.setVisible(not calibrated)
        self.calibrate_btn.setText("⏳ Stop Rounds" if calibrating else "⏱ Start Rounds")
        if not calibrated:
            self.subtitle.setText(
                "Perform one round, then click Stop to set your pace."
                if calibrating else
                "First, let's time one round."
            )
        else:
            self.subtitle.setText("The counter will advance automatically.")

        # counting view
        for w in (self.rounds_caption, self.count_lbl, self.goal_caption, self.goal_edit, self.round_time_lbl):
            w.setVisible(calibrated)

        self.count_lbl.setText(str(t.round_count))
        self.goal_edit.setEnabled(not t.counting)
        if parse_goal(self.goal_edit.text()) != t.goal_rounds:
            # goal changed outside the field (reset); typed text always parses to the current goal
            self.goal_edit.blockSignals(True)
            self.goal_edit.setText(goal_text(t.goal_rounds))
            self.goal_edit.blockSignals(False)

        if calibrated:
            self.round_time_lbl.setText(format_round_time(t.round_duration_ms))

        self.goal_card.setVisible(t.goal_reached and not t.counting)

        self.start_btn.setVisible(calibrated)
        self.start_btn.setEnabled(not t.counting and not t.goal_reached)
