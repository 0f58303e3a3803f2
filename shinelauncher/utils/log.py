"""Logging setup for the launcher process."""

import os
import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

from .paths import LOG_PATH

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO", log_path: Optional[str] = LOG_PATH) -> logging.Logger:
    """Attach stream and rotating file handlers to the package logger.

    Safe to call more than once; existing handlers are replaced.
    """
    root = logging.getLogger("shinelauncher")
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    stream = logging.StreamHandler()
    stream.setFormatter(formatter)
    root.addHandler(stream)

    if log_path:
        try:
            os.makedirs(os.path.dirname(log_path), exist_ok=True)
            file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3, encoding='utf-8')
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)
        except OSError as e:
            root.warning(f"[Logging] File logging disabled: {e}")

    return root


def read_log_tail(lines: int = 200, log_path: str = LOG_PATH) -> str:
    """Return the last ``lines`` lines of the log file, or an empty string."""
    if lines <= 0 or not os.path.exists(log_path):
        return ""
    try:
        with open(log_path, 'r', encoding='utf-8', errors='replace') as f:
            content = f.readlines()
    except OSError:
        return ""
    return "".join(content[-lines:])
