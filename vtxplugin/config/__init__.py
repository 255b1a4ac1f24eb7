"""Configuration module for vtxplugin."""

from vtxplugin.config.access import clear_settings_cache, get_settings
from vtxplugin.config.loader import get_config_path, load_settings
from vtxplugin.config.schema import LocalHostSettings, SdkSettings

__all__ = [
    "LocalHostSettings",
    "SdkSettings",
    "clear_settings_cache",
    "get_config_path",
    "get_settings",
    "load_settings",
]
