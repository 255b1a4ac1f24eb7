"""Configuration schema using Pydantic.

Settings for the SDK's ambient concerns (logging) and for the local
development host. Read from `VTXPLUGIN_*` environment variables and an
optional JSON file at ~/.vtxplugin/config.json.
"""

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LocalHostSettings(BaseModel):
    """Local development host configuration."""
    database_path: str = ":memory:"  # SQLite file backing db calls
    read_only: bool = False  # Reject writes the way a restricted host policy does
    http_timeout_seconds: float = 30.0
    event_log_limit: int = Field(default=1000, ge=1)  # Published events kept for inspection
    files_dir: str = ""  # Directory whose files are registered by name as file uuids


class SdkSettings(BaseSettings):
    """Root configuration for vtxplugin."""
    model_config = SettingsConfigDict(env_prefix="VTXPLUGIN_", env_nested_delimiter="__")

    log_level: str = "INFO"
    log_file: str | None = None
    local_host: LocalHostSettings = Field(default_factory=LocalHostSettings)
