# src/focusforge/logging_setup.py

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILE_NAME = "focusforge.log"
LOG_FILE_MAX_BYTES = 2 * 1024 * 1024
LOG_FILE_BACKUPS = 3

# Longest matching prefix wins. Anything unlisted is third-party: errors only.
_CONSOLE_THRESHOLDS: tuple[tuple[str, int], ...] = (
    ("focusforge.billing.", logging.WARNING),  # background entitlement watcher
    ("focusforge.", logging.NOTSET),
    ("py.warnings", logging.ERROR),
)


class _ConsoleNoiseFilter(logging.Filter):
    """Keep the prompt readable: our logs pass, library chatter needs ERROR+."""

    def filter(self, record: logging.LogRecord) -> bool:
        threshold = logging.ERROR
        best = -1
        for prefix, level in _CONSOLE_THRESHOLDS:
            if record.name.startswith(prefix) and len(prefix) > best:
                threshold, best = level, len(prefix)
        return record.levelno >= threshold


def setup_logging(
    *,
    log_dir: str | Path = ".local/focusforge",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Install a filtered stderr handler and a rotating file handler that
    keeps everything. Returns the log file path.

    Call once at startup, before the first log line.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.addFilter(_ConsoleNoiseFilter())

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    file_handler.setLevel(file_level)

    for handler in (console, file_handler):
        handler.setFormatter(fmt)
        root.addHandler(handler)

    logging.captureWarnings(True)

    # Request-level DEBUG from the HTTP stack floods the file during watch polling.
    for noisy in ("httpx", "httpcore", "openai"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return log_file
