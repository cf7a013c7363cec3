"""Persistent JSON user settings.

Stores the default source, a GitHub token, and the highlight style.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import os
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "studylenses"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
TOKEN_ENV_VAR = "STUDYLENSES_GITHUB_TOKEN"
DEFAULT_STYLE = "monokai"


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are ignored to keep runtime behavior non-fatal when
    config cannot be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError:
        pass


def _load_string(key: str) -> str | None:
    value = load_config().get(key)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _save_string(key: str, value: str | None) -> None:
    config = load_config()
    stripped = value.strip() if value is not None else ""
    if stripped:
        config[key] = stripped
    else:
        config.pop(key, None)
    save_config(config)


def load_default_source() -> str | None:
    """Load the source (snapshot path or GitHub URL) used when none is given."""
    return _load_string("default_source")


def save_default_source(source: str | None) -> None:
    """Persist the default source; ``None`` or blank clears it."""
    _save_string("default_source", source)


def load_github_token() -> str | None:
    """Return the GitHub token, preferring the environment over stored config."""
    env_token = os.environ.get(TOKEN_ENV_VAR, "").strip()
    if env_token:
        return env_token
    return _load_string("github_token")


def save_github_token(token: str | None) -> None:
    _save_string("github_token", token)


def load_style_name() -> str:
    """Load persisted Pygments style name, defaulting to ``monokai``."""
    return _load_string("style") or DEFAULT_STYLE


def save_style_name(style: str) -> None:
    _save_string("style", style)


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "TOKEN_ENV_VAR",
    "DEFAULT_STYLE",
    "load_config",
    "save_config",
    "load_default_source",
    "save_default_source",
    "load_github_token",
    "save_github_token",
    "load_style_name",
    "save_style_name",
]
