"""Logging configuration, set up once by the CLI.

Every module logs through ``logging.getLogger(__name__)``. Batch runs log to
stderr; the interactive menu logs only to a file so the screen stays intact.

Levels are resolved in precedence order:
    CLI flag  >  BRAVIACTL_LOG_LEVEL env var  >  WARNING (default)
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

LEVEL_ENV_VAR = "BRAVIACTL_LOG_LEVEL"

_FMT_MINIMAL = "%(message)s"
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d - %(message)s"
_DATEFMT_SHORT = "%H:%M:%S"
_FMT_FILE = _FMT_DEBUG
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"


def parse_level(name: str | None, default: int = logging.WARNING) -> int:
    if not name:
        return default
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else default


def resolve_level(cli_level: str | None) -> int:
    return parse_level(cli_level or os.environ.get(LEVEL_ENV_VAR))


def setup_logging(
    level: int = logging.WARNING,
    *,
    console: bool = True,
    log_file: Path | None = None,
) -> None:
    """Configure the root logger for the whole process.

    The console handler writes to stderr with a format that grows more
    detailed as ``level`` drops. ``log_file`` always gets full detail; a file
    that cannot be opened is skipped.
    """
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    if console:
        if level <= logging.DEBUG:
            fmt, datefmt = _FMT_DEBUG, _DATEFMT_SHORT
        elif level <= logging.INFO:
            fmt, datefmt = _FMT_VERBOSE, _DATEFMT_SHORT
        else:
            fmt, datefmt = _FMT_MINIMAL, None
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
        root.addHandler(handler)

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
        except OSError:
            file_handler = None
        if file_handler is not None:
            file_handler.setLevel(level)
            file_handler.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
            root.addHandler(file_handler)

    if not root.handlers:
        root.addHandler(logging.NullHandler())
