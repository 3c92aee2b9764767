"""Persistent JSON config helpers.

Stores the retry policy, the default target serial, the adb path, and the UI
theme. All access is defensive: malformed or missing config falls back to
defaults, one key at a time.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir, user_log_dir

from .execution import (
    DEFAULT_PROGRAM,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_DELAY,
    DEFAULT_TRANSIENT_PATTERNS,
    RetryPolicy,
)

logger = logging.getLogger(__name__)

APP_NAME = "braviactl"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / f"{APP_NAME}.log"


@dataclass(frozen=True)
class Settings:
    retry_attempts: int = DEFAULT_RETRY_ATTEMPTS
    retry_delay: float = DEFAULT_RETRY_DELAY
    transient_patterns: tuple[str, ...] = DEFAULT_TRANSIENT_PATTERNS
    default_target: str | None = None
    adb_path: str = DEFAULT_PROGRAM
    theme: str | None = None

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=self.retry_attempts,
            delay=self.retry_delay,
            transient_patterns=self.transient_patterns,
        )


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and otherwise ignored so a read-only config
    directory never breaks the session.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("could not write config %s: %s", CONFIG_PATH, exc)


def _coerce_nonnegative_int(value: object, default: int) -> int:
    """Booleans, non-integers, and negatives fall back to ``default``."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return default
    return value


def _coerce_nonnegative_float(value: object, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        return default
    return float(value)


def _coerce_optional_str(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _coerce_patterns(value: object) -> tuple[str, ...]:
    if not isinstance(value, list):
        return DEFAULT_TRANSIENT_PATTERNS
    patterns = tuple(item for item in value if isinstance(item, str) and item.strip())
    return patterns


def load_settings() -> Settings:
    """Read settings from the config file with per-key validation."""
    data = load_config()
    return Settings(
        retry_attempts=_coerce_nonnegative_int(data.get("retry_attempts"), DEFAULT_RETRY_ATTEMPTS),
        retry_delay=_coerce_nonnegative_float(data.get("retry_delay"), DEFAULT_RETRY_DELAY),
        transient_patterns=_coerce_patterns(data.get("transient_patterns")),
        default_target=_coerce_optional_str(data.get("default_target")),
        adb_path=_coerce_optional_str(data.get("adb_path")) or DEFAULT_PROGRAM,
        theme=_coerce_optional_str(data.get("theme")),
    )


def save_default_target(target: str | None) -> None:
    """Persist the remembered target; ``None`` removes it."""
    config = load_config()
    if target:
        config["default_target"] = target
    else:
        config.pop("default_target", None)
    save_config(config)
