# tasktracker/logging_setup.py

from __future__ import annotations

import logging
import sys


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable:
    - allow every tasktracker log at the configured level
    - SQL echo and other third-party chatter only at WARNING+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith("tasktracker"):
            return True
        # uvicorn's own startup and access lines stay visible.
        if record.name.startswith("uvicorn"):
            return True
        return record.levelno >= logging.WARNING


def setup_logging(level: str | int = logging.INFO) -> None:
    """
    Install one stderr handler on the root logger.

    Call this once, early (app startup or the seed script).
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    logging.captureWarnings(True)
