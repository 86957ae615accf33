# roundcounter/cue/tts_clip.py
import asyncio
import hashlib
import logging
from pathlib import Path
from typing import Optional

import edge_tts
from gtts import gTTS

from roundcounter.cue.cue_api import CueError, cue_cache_dir

logger = logging.getLogger(__name__)

# locale -> {gender: edge-tts voice}
VOICE_MAP = {
    "co.uk": {"Male": "en-GB-ThomasNeural", "Female": "en-GB-SoniaNeural"},
    "com": {"Male": "en-US-AndrewMultilingualNeural", "Female": "en-US-JennyNeural"},
    "com.au": {"Male": "en-AU-WilliamMultilingualNeural", "Female": "en-AU-NatashaNeural"},
    "co.in": {"Male": "en-IN-PrabhatNeural", "Female": "en-IN-NeerjaNeural"},
    "ca": {"Male": "en-CA-LiamNeural", "Female": "en-CA-ClaraNeural"},
    "ie": {"Male": "en-IE-ConnorNeural", "Female": "en-IE-EmilyNeural"},
}


def voice_for(locale: str, gender: str) -> str:
    return VOICE_MAP.get(locale, VOICE_MAP["co.uk"]).get(gender, "en-GB-SoniaNeural")


def clip_path(text: str, voice_id: str, cache_dir: Optional[Path] = None) -> Path:
    key = f"{text}|{voice_id}"
    return cue_cache_dir(cache_dir) / (hashlib.md5(key.encode("utf-8")).hexdigest() + ".mp3")


def generate_clip(
    text: str,
    locale: str = "co.uk",
    gender: str = "Female",
    cache_dir: Optional[Path] = None,
) -> Path:
    """
    Speech clip for `text`, generated once and then served from the cache.
    edge-tts first, gTTS as fallback. Raises CueError if both fail.
    """
    text = (text or "").strip()
    if not text:
        raise CueError("Nothing to say: goal phrase is empty.")

    voice_id = voice_for(locale, gender)
    path = clip_path(text, voice_id, cache_dir)
    if path.exists() and path.stat().st_size > 0:
        logger.debug("Using cached clip [%s]: %s", voice_id, path)
        return path

    tmp = path.with_suffix(".part")

    try:
        logger.info("Requesting edge-tts clip (voice %s)", voice_id)

        async def _generate():
            communicate = edge_tts.Communicate(text, voice_id)
            await communicate.save(str(tmp))

        asyncio.run(_generate())
    except Exception as e:
        logger.warning("edge-tts failed: %r. Falling back to gTTS", e)
        try:
            tld = locale if locale in VOICE_MAP else "co.uk"
            gTTS(text=text, lang="en", tld=tld).save(str(tmp))
        except Exception as e2:
            raise CueError(f"Audio generation failed: {e2}") from e2

    if not tmp.exists() or tmp.stat().st_size == 0:
        raise CueError("Audio generation failed. No media was returned.")

    tmp.replace(path)
    return path
