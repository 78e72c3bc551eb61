# src/taskflow/logging_setup.py

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

APP_LOGGER = "taskflow"

_FILE_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"


def level_from_name(name: str | None, default: int = logging.INFO) -> int:
    """'debug' / 'INFO' / '10' -> logging level; anything else -> default."""
    raw = (name or "").strip()
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else default


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the interactive console readable (the REPL shares the terminal):
    - app logs pass, except backend chatter below WARNING
      (the user already sees the outcome as a notice)
    - third-party loggers and captured Python warnings only at ERROR+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == APP_LOGGER or name.startswith(APP_LOGGER + "."):
            if name.startswith(f"{APP_LOGGER}.backends."):
                return record.levelno >= logging.WARNING
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/taskflow",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
) -> Path:
    """
    Console handler (stderr, filtered) plus a rotating debug log file.

    Call once at startup, before the first log line. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "taskflow.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = RotatingFileHandler(
        log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(file_handler)

    logging.captureWarnings(True)

    # Request lines from the HTTP stack are only useful in the file.
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return log_file
