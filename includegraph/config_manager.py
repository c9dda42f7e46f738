"""Persisted engine settings stored in ``config.toml``.

Only the ``[engine]`` section belongs to IncludeGraph; other sections in the
file are preserved untouched when settings are saved.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

import toml

from . import config
from .errors import ConfigError
from .models import Direction
from .resolver import TIE_BREAKS

logger = logging.getLogger(__name__)

ENGINE_SECTION = "engine"


def default_engine_config() -> Dict[str, Any]:
    return {
        "depth": config.DEFAULT_DEPTH,
        "direction": config.DEFAULT_DIRECTION,
        "tie_break": config.DEFAULT_TIE_BREAK,
        "max_files": config.DEFAULT_MAX_FILES,
        "churn_commits": config.DEFAULT_CHURN_COMMITS,
        "extensions": list(config.CPP_EXTENSIONS),
    }


def load_full_config() -> Dict[str, Any]:
    """Load the entire TOML config (all sections)."""
    if not config.CONFIG_FILE.exists():
        return {}
    try:
        with open(config.CONFIG_FILE, "r", encoding="utf-8") as f:
            return toml.load(f)
    except (OSError, toml.TomlDecodeError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", config.CONFIG_FILE, exc)
        return {}


def _save_full_config(payload: Dict[str, Any]) -> None:
    config.ensure_base_dirs()
    with open(config.CONFIG_FILE, "w", encoding="utf-8") as f:
        toml.dump(payload, f)


def validate_engine_config(values: Dict[str, Any]) -> Dict[str, Any]:
    """Coerce and check engine settings, raising :class:`ConfigError`."""
    checked: Dict[str, Any] = {}
    for key, value in values.items():
        if key in ("depth", "max_files", "churn_commits"):
            try:
                number = int(value)
            except (TypeError, ValueError):
                raise ConfigError(f"'{key}' must be an integer, got {value!r}") from None
            minimum = 0 if key == "depth" else 1
            if number < minimum:
                raise ConfigError(f"'{key}' must be >= {minimum}, got {number}")
            checked[key] = number
        elif key == "direction":
            try:
                checked[key] = Direction(value).value
            except ValueError:
                raise ConfigError(
                    f"'direction' must be one of: {', '.join(d.value for d in Direction)}"
                ) from None
        elif key == "tie_break":
            if value not in TIE_BREAKS:
                raise ConfigError(f"'tie_break' must be one of: {', '.join(TIE_BREAKS)}")
            checked[key] = value
        elif key == "extensions":
            if isinstance(value, str):
                value = [v.strip() for v in value.split(",") if v.strip()]
            exts = [v if v.startswith(".") else f".{v}" for v in value]
            if not exts:
                raise ConfigError("'extensions' must list at least one file extension")
            checked[key] = [e.lower() for e in exts]
        else:
            raise ConfigError(f"Unknown setting '{key}'")
    return checked


def load_engine_config() -> Dict[str, Any]:
    """Defaults overlaid with the validated ``[engine]`` section."""
    merged = default_engine_config()
    section = load_full_config().get(ENGINE_SECTION, {})
    merged.update(validate_engine_config(section))
    return merged


def save_engine_config(**values: Any) -> Dict[str, Any]:
    """Validate and persist *values*, returning the effective engine config."""
    checked = validate_engine_config(values)
    payload = load_full_config()
    section = dict(payload.get(ENGINE_SECTION, {}))
    section.update(checked)
    payload[ENGINE_SECTION] = section
    _save_full_config(payload)
    return load_engine_config()


def reset_engine_config() -> None:
    """Remove the ``[engine]`` section, restoring defaults."""
    payload = load_full_config()
    if payload.pop(ENGINE_SECTION, None) is not None:
        _save_full_config(payload)
