"""Process-wide settings, reloaded when the config file or VTXPLUGIN_* environment changes."""

from __future__ import annotations

import os
import threading
from pathlib import Path

from vtxplugin.config.loader import get_config_path, load_settings
from vtxplugin.config.schema import SdkSettings

ENV_PREFIX = "VTXPLUGIN_"

_SettingsKey = tuple[str, tuple[tuple[str, str], ...]]

_lock = threading.RLock()
_cache: dict[_SettingsKey, SdkSettings] = {}


def _env_snapshot() -> tuple[tuple[str, str], ...]:
    return tuple(sorted((k, v) for k, v in os.environ.items() if k.upper().startswith(ENV_PREFIX)))


def get_settings(*, config_path: Path | None = None, force_reload: bool = False) -> SdkSettings:
    """Settings for the current config file and environment.

    Entries are keyed by the resolved file path and every VTXPLUGIN_*
    variable, so changing either one loads fresh settings.
    """
    path = Path(config_path or get_config_path()).expanduser().resolve()
    key = (str(path), _env_snapshot())
    with _lock:
        settings = None if force_reload else _cache.get(key)
        if settings is None:
            settings = load_settings(path)
            _cache[key] = settings
        return settings


def clear_settings_cache() -> None:
    with _lock:
        _cache.clear()
