"""Configuration loading utilities."""

import json
import os
from pathlib import Path
from typing import Any

from vtxplugin.config.schema import SdkSettings


def get_config_path() -> Path:
    """Config file path: $VTXPLUGIN_CONFIG or ~/.vtxplugin/config.json."""
    override = os.environ.get("VTXPLUGIN_CONFIG", "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / ".vtxplugin" / "config.json"


def load_settings(config_path: Path | None = None) -> SdkSettings:
    """
    Load settings from file (when present) layered over the environment.

    Values in the file win over VTXPLUGIN_* variables.
    """
    path = config_path or get_config_path()
    if not path.exists():
        return SdkSettings()
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        raise ValueError(f"Invalid config file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Invalid config file {path}: expected a JSON object")
    return SdkSettings(**convert_keys(data))


def convert_keys(data: Any) -> Any:
    """Convert camelCase keys to snake_case for Pydantic."""
    if isinstance(data, dict):
        return {camel_to_snake(k): convert_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_keys(item) for item in data]
    return data


def camel_to_snake(name: str) -> str:
    """Convert camelCase to snake_case."""
    result = []
    for i, char in enumerate(name):
        if char.isupper() and i > 0:
            result.append("_")
        result.append(char.lower())
    return "".join(result)
