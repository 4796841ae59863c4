"""Persistent JSON config helpers.

Stores tree-view tuning (row height, buffering, thresholds), the backend base
URL, and the order-persistence failure policy. Reads never raise:
malformed or missing config falls back to defaults.
"""

from __future__ import annotations

import enum
import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "kbtree"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

DEFAULT_BASE_URL = "http://127.0.0.1:8080"


class PersistFailurePolicy(str, enum.Enum):
    """What to do with an optimistic reorder whose persistence failed."""

    KEEP = "keep"
    ROLLBACK = "rollback"


@dataclass(frozen=True)
class TreeViewSettings:
    """Tuning knobs for the tree view and its storage client."""

    row_height: int = 28
    buffer_rows: int = 10
    enable_threshold: int = 100
    search_debounce_seconds: float = 0.3
    base_url: str = DEFAULT_BASE_URL
    request_timeout_seconds: float = 10.0
    persist_failure_policy: PersistFailurePolicy = PersistFailurePolicy.KEEP


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
        logger.warning("Ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are logged and otherwise ignored so a read-only config
    directory never breaks the tree view.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        logger.warning("Could not write config %s: %s", CONFIG_PATH, exc)


def _positive_int(value: object, default: int) -> int:
    """Booleans and non-positive/non-integer values fall back to ``default``."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return default
    return value


def _nonnegative_int(value: object, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return default
    return value


def _positive_float(value: object, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        return default
    return float(value)


def _nonnegative_float(value: object, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        return default
    return float(value)


def parse_failure_policy(value: object) -> PersistFailurePolicy:
    """Return the policy named by ``value``, falling back to ``KEEP``."""
    if isinstance(value, PersistFailurePolicy):
        return value
    if isinstance(value, str):
        try:
            return PersistFailurePolicy(value.strip().lower())
        except ValueError:
            pass
    return PersistFailurePolicy.KEEP


def settings_from_dict(data: dict[str, object]) -> TreeViewSettings:
    """Build settings from a config mapping, sanitizing every field."""
    defaults = TreeViewSettings()
    base_url = data.get("base_url")
    if not isinstance(base_url, str) or not base_url.strip():
        base_url = defaults.base_url
    return TreeViewSettings(
        row_height=_positive_int(data.get("row_height"), defaults.row_height),
        buffer_rows=_nonnegative_int(data.get("buffer_rows"), defaults.buffer_rows),
        enable_threshold=_nonnegative_int(data.get("enable_threshold"), defaults.enable_threshold),
        search_debounce_seconds=_nonnegative_float(
            data.get("search_debounce_seconds"),
            defaults.search_debounce_seconds,
        ),
        base_url=base_url.strip().rstrip("/"),
        request_timeout_seconds=_positive_float(
            data.get("request_timeout_seconds"),
            defaults.request_timeout_seconds,
        ),
        persist_failure_policy=parse_failure_policy(data.get("persist_failure_policy")),
    )


def load_settings() -> TreeViewSettings:
    """Load tree-view settings from the persisted config."""
    return settings_from_dict(load_config())


def save_settings(settings: TreeViewSettings) -> None:
    """Persist settings, preserving unrelated keys already in the config."""
    config = load_config()
    config.update(
        {
            "row_height": settings.row_height,
            "buffer_rows": settings.buffer_rows,
            "enable_threshold": settings.enable_threshold,
            "search_debounce_seconds": settings.search_debounce_seconds,
            "base_url": settings.base_url,
            "request_timeout_seconds": settings.request_timeout_seconds,
            "persist_failure_policy": settings.persist_failure_policy.value,
        }
    )
    save_config(config)
