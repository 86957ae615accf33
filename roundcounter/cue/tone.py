# roundcounter/cue/tone.py
import wave
from pathlib import Path
from typing import Optional

import numpy as np

from roundcounter.cue.cue_api import cue_cache_dir

SAMPLE_RATE = 44100


def make_tone(freq_hz: float, duration_ms: int, sample_rate: int = SAMPLE_RATE, volume: float = 0.8) -> np.ndarray:
    """Sine tone as int16 samples, with a 10 ms fade at both ends to avoid clicks."""
    duration = max(1, int(duration_ms)) / 1000.0
    n = max(1, int(duration * sample_rate))
    t = np.linspace(0, duration, n, False)
    wave_data = np.sin(freq_hz * t * 2 * np.pi) * float(volume)

    fade = min(int(sample_rate * 0.01), n // 2)
    if fade > 0:
        wave_data[:fade] *= np.linspace(0, 1, fade)
        wave_data[-fade:] *= np.linspace(1, 0, fade)

    return (wave_data * 32767).astype(np.int16)


def write_tone_wav(freq_hz: int, duration_ms: int, cache_dir: Optional[Path] = None) -> Path:
    path = cue_cache_dir(cache_dir) / f"tone_{int(freq_hz)}hz_{int(duration_ms)}ms.wav"
    if path.exists() and path.stat().st_size > 44:
        return path

    samples = make_tone(freq_hz, duration_ms)
    tmp = path.with_suffix(".tmp")
    with wave.open(str(tmp), "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(samples.tobytes())
    tmp.replace(path)
    return path
