from PySide6.QtWidgets import QWidget, QVBoxLayout, QLabel, QPushButton, QFrame
from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QGuiApplication


class NoticePopup(QWidget):
    """
    Non-fatal notice (toast) shown near the bottom of the primary screen.
    Never takes focus; closes on "OK" or after `timeout_ms`.
    """
    def __init__(self, title="Notice", message="", timeout_ms: int = 6000):
        super().__init__()

        self.setWindowFlags(
            Qt.ToolTip |
            Qt.FramelessWindowHint |
            Qt.WindowStaysOnTopHint
        )
        self.setAttribute(Qt.WA_TranslucentBackground, True)
        self.setAttribute(Qt.WA_DeleteOnClose, True)
        self.setFocusPolicy(Qt.NoFocus)

        outer = QVBoxLayout(self)
        outer.setContentsMargins(0, 0, 0, 0)

        card = QFrame()
        card.setStyleSheet("""
            QFrame {
                background: rgba(18,13,8,0.96);
                border: 1px solid rgba(245,158,11,0.30);
                border-radius: 16px;
            }
        """)
        lay = QVBoxLayout(card)
        lay.setContentsMargins(18, 14, 18, 14)
        lay.setSpacing(8)

        title_lbl = QLabel(title)
        title_lbl.setStyleSheet("font-size: 16px; font-weight: 850;")

        self.message_lbl = QLabel(message)
        self.message_lbl.setWordWrap(True)
        self.message_lbl.setStyleSheet("font-size: 13px; color: rgba(246,239,230,0.80);")

        btn = QPushButton("OK")
        btn.clicked.connect(self.close)
        btn.setCursor(Qt.PointingHandCursor)

        lay.addWidget(title_lbl)
        lay.addWidget(self.message_lbl)
        lay.addWidget(btn, alignment=Qt.AlignRight)
        outer.addWidget(card)

        self.setFixedSize(380, 150)

        self._auto_close = QTimer(self)
        self._auto_close.setSingleShot(True)
        self._auto_close.timeout.connect(self.close)
        if timeout_ms > 0:
            self._auto_close.start(int(timeout_ms))

    def showEvent(self, event):
        super().showEvent(event)
        screen = QGuiApplication.primaryScreen()
        if not screen:
            return
        g = screen.availableGeometry()
        x = g.x() + (g.width() - self.width()) // 2
        y = g.y() + g.height() - self.height() - 48
        self.move(x, y)


_current = None


def show_notice(title: str, message: str, timeout_ms: int = 6000) -> NoticePopup:
    """Show one notice at a time; a newer notice replaces the visible one."""
    global _current
    if _current is not None:
        try:
            _current.close()
        except RuntimeError:
            pass  # already deleted by Qt
    _current = NoticePopup(title=title, message=message, timeout_ms=timeout_ms)
    _current.show()
    return _current
