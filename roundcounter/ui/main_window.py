# roundcounter/ui/main_window.py
import logging
import sys

from PySide6.QtWidgets import (
    QApplication,
    QMainWindow,
    QStackedWidget,
    QWidget,
    QVBoxLayout,
    QGraphicsDropShadowEffect,
)
from PySide6.QtCore import Qt, QRectF
from PySide6.QtGui import QPainterPath, QRegion, QGuiApplication

from roundcounter.core.logger import configure_logging
from roundcounter.core.round_timer import RoundTimer
from roundcounter.core.settings_store import AppSettings, SettingsStore
from roundcounter.core.visitor_counter import VisitorCounter, make_visitor_counter
from roundcounter.cue.player import CuePlayer
from roundcounter.ui.counter_screen import CounterScreen
from roundcounter.ui.notice_popup import show_notice
from roundcounter.ui.settings import SettingsScreen
from roundcounter.ui.style import APP_QSS
from roundcounter.ui.titlebar import TitleBar
from roundcounter.ui.visitor_worker import VisitorCountWorker

logger = logging.getLogger(__name__)

ORG = "RoundCounter"
APP = "RoundCounter"


class MainWindow(QMainWindow):
    def __init__(self, settings_store: SettingsStore | None = None, visitor_counter: VisitorCounter | None = None):
        super().__init__()

        self.setWindowTitle("Round Counter")
        self.resize(560, 760)

        self.setWindowFlag(Qt.FramelessWindowHint, True)
        self.setAttribute(Qt.WA_TranslucentBackground, True)

        self._radius = 18
        self._shadow_margin = 22

        self.settings_store = settings_store or SettingsStore()
        settings = self.settings_store.load()

        # ---- Core + collaborators
        self.round_timer = RoundTimer(
            default_goal=settings.default_goal,
            calibration_offset_ms=settings.calibration_offset_ms,
            parent=self,
        )
        self.cue_player = CuePlayer(settings, parent=self)

        self.round_timer.audio_unlock.connect(self.cue_player.prime)
        self.round_timer.reached.connect(self._on_goal_reached)
        self.round_timer.changed.connect(self._on_timer_changed)
        self.cue_player.failed.connect(self._on_cue_failed)

        # ---- Frame
        outer = QWidget()
        outer.setAttribute(Qt.WA_TranslucentBackground, True)

        outer_layout = QVBoxLayout(outer)
        outer_layout.setContentsMargins(
            self._shadow_margin,
            self._shadow_margin,
            self._shadow_margin,
            self._shadow_margin,
        )
        outer_layout.setSpacing(0)

        self.container = QWidget()
        self.container.setObjectName("appContainer")
        self.container.setStyleSheet(f"""
            QWidget#appContainer {{
                background: rgba(18, 13, 8, 0.97);
                border-radius: {self._radius}px;
            }}
        """)

        shadow = QGraphicsDropShadowEffect(self)
        shadow.setBlurRadius(42)
        shadow.setOffset(0, 10)
        shadow.setColor(Qt.black)
        self.container.setGraphicsEffect(shadow)

        container_layout = QVBoxLayout(self.container)
        container_layout.setContentsMargins(12, 12, 12, 12)
        container_layout.setSpacing(10)

        self.stack = QStackedWidget()

        self.titlebar = TitleBar(self, "Round Counter", on_settings=self.go_settings)

        container_layout.addWidget(self.titlebar)
        container_layout.addWidget(self.stack)
        outer_layout.addWidget(self.container)
        self.setCentralWidget(outer)

        # ---- Screens
        self.counter = CounterScreen(self.round_timer)
        self.settings = SettingsScreen(
            on_back=self.go_counter,
            on_saved=self.apply_settings,
            store=self.settings_store,
        )
        self.stack.addWidget(self.counter)
        self.stack.addWidget(self.settings)
        self.stack.setCurrentWidget(self.counter)

        self._place_safely()

        # ---- Visitor count, once per session
        self._visitor_worker = VisitorCountWorker(visitor_counter or make_visitor_counter(settings))
        self._visitor_worker.done.connect(self._on_visitor_count)
        self._visitor_worker.start()

    # -----------------------
    # Collaborator wiring
    # -----------------------

    def _on_goal_reached(self, rounds: int):
        self.cue_player.play()

    def _on_timer_changed(self):
        self.titlebar.set_settings_enabled(not self.round_timer.counting)
        # leaving "goal reached" (reset or a higher goal) silences the cue
        if not self.round_timer.goal_reached and self.cue_player.busy:
            self.cue_player.stop()

    def _on_cue_failed(self, message: str):
        show_notice("Sound unavailable", f"The goal sound could not be played.\n{message}")

    def _on_visitor_count(self, count: int):
        if count <= 0:
            logger.info("Visitor count unavailable")
        self.counter.set_visitor_count(count)

    def apply_settings(self, settings: AppSettings):
        self.cue_player.set_settings(settings)
        # picked up by the next calibration / reset
        self.round_timer.default_goal = settings.default_goal
        self.round_timer.calibration_offset_ms = settings.calibration_offset_ms

    # -----------------------
    # Navigation
    # -----------------------

    def go_counter(self):
        self.stack.setCurrentWidget(self.counter)

    def go_settings(self):
        if self.round_timer.counting:
            return
        self.stack.setCurrentWidget(self.settings)

    # -----------------------
    # Window shape & shutdown
    # -----------------------

    def _place_safely(self):
        screen = QGuiApplication.primaryScreen()
        if screen:
            g = screen.availableGeometry()
            self.move(g.x() + 80, g.y() + 80)

    def _apply_rounded_mask(self):
        w, h = self.width(), self.height()
        m, r = self._shadow_margin, self._radius
        rect = QRectF(m, m, w - 2 * m, h - 2 * m)
        path = QPainterPath()
        path.addRoundedRect(rect, r, r)
        self.setMask(QRegion(path.toFillPolygon().toPolygon()))

    def showEvent(self, event):
        super().showEvent(event)
        self._apply_rounded_mask()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._apply_rounded_mask()

    def closeEvent(self, event):
        self.round_timer.reset()
        self.cue_player.shutdown()
        if self._visitor_worker.isRunning():
            self._visitor_worker.wait(2000)
        super().closeEvent(event)


def launch_app():
    app = QApplication(sys.argv)
    app.setOrganizationName(ORG)
    app.setApplicationName(APP)

    log_path = configure_logging()
    logger.info("Round Counter starting (log: %s)", log_path)

    app.setStyleSheet(APP_QSS)
    window = MainWindow()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    launch_app()
