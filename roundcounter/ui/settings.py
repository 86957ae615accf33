# roundcounter/ui/settings.py

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QLabel, QFrame, QHBoxLayout, QPushButton,
    QFormLayout, QSpinBox, QComboBox, QLineEdit
)
from PySide6.QtCore import Qt

from roundcounter.core.settings_store import (
    AppSettings, SettingsStore, GOAL_ACTIONS, VISITOR_BACKENDS
)
from roundcounter.cue.tts_clip import VOICE_MAP
from roundcounter.ui.style import card_qss

ACTION_LABELS = {
    "speech": "Speak the phrase",
    "clip": "Play generated voice clip",
    "tone": "Play a tone",
    "none": "No sound",
}


class SettingsScreen(QWidget):
    def __init__(self, on_back, on_saved=None, store: SettingsStore | None = None):
        super().__init__()
        self.on_back = on_back
        self.on_saved = on_saved
        self.store = store or SettingsStore()
        self.settings = self.store.load()

        root = QVBoxLayout(self)
        root.setContentsMargins(22, 20, 22, 20)
        root.setSpacing(12)

        header = QHBoxLayout()
        title = QLabel("Settings")
        title.setStyleSheet("font-size: 24px; font-weight: 800;")
        header.addWidget(title, 1)

        back = QPushButton("Back")
        back.setCursor(Qt.PointingHandCursor)
        back.clicked.connect(self.on_back)
        header.addWidget(back, 0, Qt.AlignRight)
        root.addLayout(header)

        subtitle = QLabel(
            "Goal and calibration changes apply after the next Reset. "
            "Sound changes apply to the next goal."
        )
        subtitle.setObjectName("muted")
        subtitle.setWordWrap(True)
        root.addWidget(subtitle)

        c = QFrame()
        c.setStyleSheet(card_qss())
        root.addWidget(c)

        wrap = QVBoxLayout(c)
        wrap.setContentsMargins(16, 14, 16, 14)

        form = QFormLayout()
        form.setHorizontalSpacing(18)
        form.setVerticalSpacing(12)
        wrap.addLayout(form)

        self.default_goal = QSpinBox(); self.default_goal.setRange(0, 100000)
        self.calibration_offset_s = QSpinBox(); self.calibration_offset_s.setRange(0, 600); self.calibration_offset_s.setSuffix(" s")

        self.goal_action = QComboBox()
        for key in GOAL_ACTIONS:
            self.goal_action.addItem(ACTION_LABELS[key], key)
        self.goal_phrase = QLineEdit()
        self.cue_repeats = QSpinBox(); self.cue_repeats.setRange(1, 20)

        self.voice_locale = QComboBox()
        for loc in VOICE_MAP:
            self.voice_locale.addItem(loc, loc)
        self.voice_gender = QComboBox()
        self.voice_gender.addItem("Female", "Female")
        self.voice_gender.addItem("Male", "Male")

        self.tone_hz = QSpinBox(); self.tone_hz.setRange(50, 8000); self.tone_hz.setSingleStep(10); self.tone_hz.setSuffix(" Hz")
        self.tone_ms = QSpinBox(); self.tone_ms.setRange(50, 5000); self.tone_ms.setSingleStep(50); self.tone_ms.setSuffix(" ms")

        self.visitor_backend = QComboBox()
        for key in VISITOR_BACKENDS:
            self.visitor_backend.addItem(key, key)
        self.firestore_project = QLineEdit()
        self.firestore_project.setPlaceholderText("Google Cloud project id")

        form.addRow("Default goal (rounds)", self.default_goal)
        form.addRow("Extra time per round", self.calibration_offset_s)
        form.addRow("When the goal is reached", self.goal_action)
        form.addRow("Phrase", self.goal_phrase)
        form.addRow("Repeat sound (times)", self.cue_repeats)
        form.addRow("Voice accent", self.voice_locale)
        form.addRow("Voice", self.voice_gender)
        form.addRow("Tone pitch", self.tone_hz)
        form.addRow("Tone length", self.tone_ms)
        form.addRow("Visitor counter", self.visitor_backend)
        form.addRow("Firestore project", self.firestore_project)

        btns = QHBoxLayout()
        btns.addStretch(1)

        reset = QPushButton("Reset defaults")
        reset.setCursor(Qt.PointingHandCursor)
        reset.clicked.connect(self._reset)

        save = QPushButton("Save")
        save.setObjectName("primary")
        save.setCursor(Qt.PointingHandCursor)
        save.clicked.connect(self._save)

        btns.addWidget(reset)
        btns.addWidget(save)
        wrap.addSpacing(10)
        wrap.addLayout(btns)

        self._load_into_ui(self.settings)

    @staticmethod
    def _select(combo: QComboBox, value: str):
        i = combo.findData(value)
        combo.setCurrentIndex(i if i >= 0 else 0)

    def _load_into_ui(self, s: AppSettings):
        self.default_goal.setValue(int(s.default_goal))
        self.calibration_offset_s.setValue(int(s.calibration_offset_ms) // 1000)
        self._select(self.goal_action, s.goal_action)
        self.goal_phrase.setText(s.goal_phrase)
        self.cue_repeats.setValue(int(s.cue_repeats))
        self._select(self.voice_locale, s.voice_locale)
        self._select(self.voice_gender, s.voice_gender)
        self.tone_hz.setValue(int(s.tone_hz))
        self.tone_ms.setValue(int(s.tone_ms))
        self._select(self.visitor_backend, s.visitor_backend)
        self.firestore_project.setText(s.firestore_project)

    def _read_from_ui(self) -> AppSettings:
        return AppSettings(
            default_goal=int(self.default_goal.value()),
            calibration_offset_ms=int(self.calibration_offset_s.value()) * 1000,
            goal_action=str(self.goal_action.currentData()),
            goal_phrase=self.goal_phrase.text().strip() or AppSettings.goal_phrase,
            cue_repeats=int(self.cue_repeats.value()),
            voice_locale=str(self.voice_locale.currentData()),
            voice_gender=str(self.voice_gender.currentData()),
            tone_hz=int(self.tone_hz.value()),
            tone_ms=int(self.tone_ms.value()),
            visitor_backend=str(self.visitor_backend.currentData()),
            firestore_project=self.firestore_project.text().strip(),
        ).normalized()

    def get_settings(self) -> AppSettings:
        return self.settings

    def _apply(self, settings: AppSettings):
        self.settings = settings
        self.store.save(self.settings)
        if callable(self.on_saved):
            self.on_saved(self.settings)

    def _save(self):
        self._apply(self._read_from_ui())
        self.on_back()

    def _reset(self):
        self._load_into_ui(AppSettings())
        self._apply(AppSettings())
