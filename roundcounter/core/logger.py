import logging
import sys
from pathlib import Path
from typing import Optional

from roundcounter.core.settings_store import data_dir

LOG_FORMAT = "%(asctime)s [RoundCounter] %(levelname)s %(name)s: %(message)s"


def configure_logging(level: int = logging.INFO, log_dir: Optional[Path] = None) -> Path:
    """
    Console + file logging for the app. Safe to call more than once.
    Returns the log file path.
    """
    out_dir = Path(log_dir) if log_dir else data_dir()
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / "roundcounter.log"

    root = logging.getLogger("roundcounter")
    root.setLevel(level)

    if not getattr(root, "_roundcounter_configured", False):
        fmt = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

        stream = logging.StreamHandler(sys.stderr)
        stream.setFormatter(fmt)
        root.addHandler(stream)

        try:
            fh = logging.FileHandler(path, encoding="utf-8")
            fh.setFormatter(fmt)
            root.addHandler(fh)
        except OSError as e:
            root.warning("File logging disabled (%s): %r", path, e)

        root._roundcounter_configured = True

    return path
