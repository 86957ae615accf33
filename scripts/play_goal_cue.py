# scripts/play_goal_cue.py
import sys

from PySide6.QtCore import QTimer
from PySide6.QtGui import QGuiApplication

from roundcounter.core.logger import configure_logging
from roundcounter.core.settings_store import SettingsStore
from roundcounter.cue.player import CuePlayer


def main():
    """Play the configured goal cue once from the terminal: play_goal_cue.py [speech|clip|tone] [times]"""
    app = QGuiApplication(sys.argv)
    app.setOrganizationName("RoundCounter")
    app.setApplicationName("RoundCounter")
    configure_logging()

    settings = SettingsStore().load()
    if len(sys.argv) > 1:
        settings.goal_action = sys.argv[1]
    times = int(sys.argv[2]) if len(sys.argv) > 2 else 1

    player = CuePlayer(settings)
    player.finished.connect(lambda: (print("✅ Done."), app.quit()))
    player.failed.connect(lambda msg: (print("❌ Cue failed:", msg), app.exit(1)))

    print(f"Playing '{settings.goal_action}' cue x{times}…")
    QTimer.singleShot(0, lambda: player.play(times))
    code = app.exec()
    player.shutdown()
    sys.exit(code)


if __name__ == "__main__":
    main()
