# roundcounter/cue/player.py
import logging
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QObject, QThread, QUrl, Signal
from PySide6.QtMultimedia import QAudioOutput, QMediaPlayer
from PySide6.QtTextToSpeech import QTextToSpeech

from roundcounter.core.settings_store import AppSettings
from roundcounter.cue.cue_api import CueError, RepeatCounter
from roundcounter.cue.tone import write_tone_wav
from roundcounter.cue.tts_clip import generate_clip

logger = logging.getLogger(__name__)


class ClipWorker(QThread):
    ready = Signal(str)   # path to the clip
    error = Signal(str)

    def __init__(self, text: str, locale: str, gender: str, cache_dir: Optional[Path] = None):
        super().__init__()
        self.text = text
        self.locale = locale
        self.gender = gender
        self.cache_dir = cache_dir

    def run(self):
        try:
            path = generate_clip(self.text, self.locale, self.gender, self.cache_dir)
            self.ready.emit(str(path))
        except Exception as e:
            self.error.emit(str(e))


class CuePlayer(QObject):
    """
    Plays the goal-reached cue `times` times, each playback waiting for the
    previous one to end.

    goal_action:
      speech -> QTextToSpeech speaks goal_phrase
      clip   -> generated speech clip (cached), played through QMediaPlayer
      tone   -> synthesized sine tone, played through QMediaPlayer
      none   -> nothing
    Failures are reported through `failed`; they never raise to the caller.
    """

    finished = Signal()
    failed = Signal(str)

    def __init__(self, settings: AppSettings, cache_dir: Optional[Path] = None, parent: Optional[QObject] = None):
        super().__init__(parent)
        self.settings = settings
        self.cache_dir = cache_dir

        self._repeats = RepeatCounter(0)
        self._tts: Optional[QTextToSpeech] = None
        self._speaking = False
        self._media: Optional[QMediaPlayer] = None
        self._audio_out: Optional[QAudioOutput] = None
        self._worker: Optional[ClipWorker] = None
        self._play_when_ready = False
        self._file_active = False

    def set_settings(self, settings: AppSettings):
        self.settings = settings

    @property
    def busy(self) -> bool:
        return (
            self._repeats.remaining > 0
            or self._play_when_ready
            or self._speaking
            or self._file_active
        )

    # -----------------------
    # Public API
    # -----------------------

    def prime(self):
        """
        Audio unlock hint (called on a user gesture). Creates the playback
        backend early and warms the clip cache so the goal cue starts promptly.
        """
        action = self.settings.goal_action
        try:
            if action == "speech":
                self._ensure_tts()
            elif action in ("clip", "tone"):
                self._ensure_media()
            if action == "clip":
                self._request_clip()
        except Exception as e:
            logger.warning("Audio prime failed: %r", e)

    def play(self, times: Optional[int] = None):
        self.stop()
        action = self.settings.goal_action
        n = self.settings.cue_repeats if times is None else int(times)
        self._repeats = RepeatCounter(n)

        if action == "none" or n <= 0:
            self._repeats.cancel()
            self.finished.emit()
            return

        try:
            if action == "speech":
                self._ensure_tts()
                self._next_speech()
            elif action == "tone":
                path = write_tone_wav(self.settings.tone_hz, self.settings.tone_ms, self.cache_dir)
                self._start_file(path)
            elif action == "clip":
                self._play_when_ready = True
                self._request_clip()
            else:
                raise CueError(f"Unknown goal action: {action}")
        except Exception as e:
            self._fail(str(e))

    def stop(self):
        self._repeats.cancel()
        self._play_when_ready = False
        if self._tts is not None and self._speaking:
            self._speaking = False
            self._tts.stop()
        if self._media is not None:
            self._file_active = False
            self._media.stop()

    # -----------------------
    # Speech
    # -----------------------

    def _ensure_tts(self):
        if self._tts is None:
            self._tts = QTextToSpeech(self)
            self._tts.stateChanged.connect(self._on_tts_state)
            self._tts.errorOccurred.connect(self._on_tts_error)

    def _next_speech(self):
        if not self._repeats.take():
            self.finished.emit()
            return
        self._speaking = True
        self._tts.say(self.settings.goal_phrase)

    def _on_tts_state(self, state):
        if state == QTextToSpeech.State.Ready and self._speaking:
            self._speaking = False
            self._next_speech()
        elif state == QTextToSpeech.State.Error and self._speaking:
            self._speaking = False
            self._fail(self._tts.errorString() or "Speech synthesis failed.")

    def _on_tts_error(self, _reason, message: str):
        if self._speaking:
            self._speaking = False
            self._fail(message or "Speech synthesis failed.")

    # -----------------------
    # Clip / tone files
    # -----------------------

    def _ensure_media(self):
        if self._media is None:
            self._media = QMediaPlayer(self)
            self._audio_out = QAudioOutput(self)
            self._audio_out.setVolume(1.0)
            self._media.setAudioOutput(self._audio_out)
            self._media.mediaStatusChanged.connect(self._on_media_status)
            self._media.errorOccurred.connect(self._on_media_error)

    def _request_clip(self):
        if self._worker is not None and self._worker.isRunning():
            return
        s = self.settings
        self._worker = ClipWorker(s.goal_phrase, s.voice_locale, s.voice_gender, self.cache_dir)
        self._worker.ready.connect(self._on_clip_ready)
        self._worker.error.connect(self._on_clip_error)
        self._worker.start()

    def _on_clip_ready(self, path: str):
        if not self._play_when_ready:
            return
        self._play_when_ready = False
        self._start_file(Path(path))

    def _on_clip_error(self, message: str):
        if self._play_when_ready:
            self._play_when_ready = False
            self._fail(message)
        else:
            logger.warning("Clip pre-generation failed: %s", message)

    def _start_file(self, path: Path):
        self._ensure_media()
        self._file_active = True
        self._media.setSource(QUrl.fromLocalFile(str(path)))
        self._next_file_playback()

    def _next_file_playback(self):
        if not self._repeats.take():
            self._file_active = False
            self.finished.emit()
            return
        self._media.setPosition(0)
        self._media.play()

    def _on_media_status(self, status):
        if not self._file_active:
            return
        if status == QMediaPlayer.MediaStatus.EndOfMedia:
            self._next_file_playback()
        elif status == QMediaPlayer.MediaStatus.InvalidMedia:
            self._fail("Could not play the notification sound.")

    def _on_media_error(self, _error, message: str):
        if self._file_active:
            self._fail(message or "Audio playback failed.")

    def _fail(self, message: str):
        self._repeats.cancel()
        self._file_active = False
        self._play_when_ready = False
        logger.warning("Goal cue failed: %s", message)
        self.failed.emit(message)

    def shutdown(self):
        self.stop()
        if self._worker is not None and self._worker.isRunning():
            self._worker.wait(2000)
