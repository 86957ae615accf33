import sys

if sys.platform == "darwin":
    FONT_STACK = 'Helvetica Neue","Arial'
elif sys.platform.startswith("win"):
    FONT_STACK = 'Segoe UI","Arial'
else:
    FONT_STACK = 'DejaVu Sans","Arial'

# saffron accent
ACCENT = "#f59e0b"
ACCENT_SOFT = "rgba(245,158,11,0.14)"
ACCENT_BORDER = "rgba(245,158,11,0.32)"

APP_QSS = f"""
QMainWindow, QWidget {{
    background: #120d08;
    color: #f6efe6;
    font-family: "{FONT_STACK}";
    font-size: 14px;
}}

QLabel {{
    color: #f6efe6;
}}

QLabel#muted {{
    color: rgba(246,239,230,0.68);
}}

QLabel#roundCount {{
    color: {ACCENT};
    font-size: 96px;
    font-weight: 900;
}}

QPushButton {{
    background: #2a1f14;
    border: 1px solid rgba(255,255,255,0.10);
    padding: 10px 14px;
    border-radius: 12px;
    font-weight: 700;
}}
QPushButton:hover {{ background: #35281a; }}
QPushButton:pressed {{ background: #231a10; }}
QPushButton:disabled {{ color: rgba(246,239,230,0.35); background: #1b140d; }}

QPushButton#primary {{
    background: {ACCENT_SOFT};
    border: 1px solid {ACCENT_BORDER};
}}
QPushButton#primary:hover {{ background: rgba(245,158,11,0.22); }}

QSpinBox, QLineEdit, QComboBox {{
    background: rgba(255,255,255,0.05);
    border: 1px solid rgba(255,255,255,0.12);
    border-radius: 10px;
    padding: 6px 10px;
    min-height: 28px;
}}
QSpinBox:disabled {{ color: rgba(246,239,230,0.40); }}
"""


def card_qss(radius: int = 16) -> str:
    return f"""
        QFrame {{
            background: rgba(255,255,255,0.04);
            border: 1px solid rgba(255,255,255,0.08);
            border-radius: {radius}px;
        }}
    """
