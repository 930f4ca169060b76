"""Persistent JSON config helpers.

Stores the current transfer mode, the engine factory spec, and a few CLI
defaults. All access is defensive: malformed or missing config falls back
safely.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir

from ..volume_model.types import TransferMode

APP_NAME = "hfsnav"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is ignored to keep callers non-fatal
    when config cannot be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def _load_string(key: str) -> str | None:
    value = load_config().get(key)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _save_value(key: str, value: object) -> None:
    config = load_config()
    config[key] = value
    save_config(config)


def load_transfer_mode() -> TransferMode:
    """Return the persisted transfer mode, ``auto`` when unset/invalid."""
    return TransferMode.parse(load_config().get("transfer_mode"), default=TransferMode.AUTO)


def save_transfer_mode(mode: TransferMode) -> None:
    _save_value("transfer_mode", TransferMode.parse(mode).value)


def load_engine_spec() -> str | None:
    """Load the ``module:factory`` engine spec, ``None`` when unset."""
    return _load_string("engine")


def save_engine_spec(spec: str) -> None:
    stripped = str(spec).strip()
    if not stripped:
        return
    _save_value("engine", stripped)


def load_open_read_only() -> bool:
    """Return the read-only default; only explicit booleans count."""
    value = load_config().get("open_read_only")
    return bool(value) if isinstance(value, bool) else False


def save_open_read_only(read_only: bool) -> None:
    _save_value("open_read_only", bool(read_only))


def load_last_export_dir() -> Path | None:
    value = _load_string("last_export_dir")
    return Path(value) if value is not None else None


def save_last_export_dir(directory: Path) -> None:
    _save_value("last_export_dir", str(directory))


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "load_config",
    "save_config",
    "load_transfer_mode",
    "save_transfer_mode",
    "load_engine_spec",
    "save_engine_spec",
    "load_open_read_only",
    "save_open_read_only",
    "load_last_export_dir",
    "save_last_export_dir",
]
