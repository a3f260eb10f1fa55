"""
Configuration management using Pydantic Settings.
Follows Single Responsibility Principle - only handles configuration.

Sources, lowest precedence first:
defaults < environment / .env < JSON config file < command-line overrides.
"""

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import Field, ValidationError, field_validator  # type: ignore
from pydantic_settings import BaseSettings, SettingsConfigDict  # type: ignore

from core.constants import BYTES_PER_MB, CONFIG_FILE_KEYS, DEFAULT_AUDIO_FORMAT
from core.errors import ConfigError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = Field(default="MP3 Host API", alias="APP_NAME")
    app_version: str = Field(default="1.0.0", alias="APP_VERSION")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")

    # API Service
    api_host: str = Field(default="0.0.0.0", alias="API_HOST")
    api_port: int = Field(default=8100, alias="API_PORT")

    # Artifact store
    files_dir: str = Field(default="files", alias="FILES_DIR")
    dir_size_max_mb: int = Field(default=200, alias="DIR_SIZE_MAX_MB")
    audio_format: str = Field(default=DEFAULT_AUDIO_FORMAT, alias="AUDIO_FORMAT")
    # Removals allowed per eviction pass; 1 keeps single-step eviction
    max_evictions_per_pass: int = Field(default=1, alias="MAX_EVICTIONS_PER_PASS")

    # External downloader
    exec_path: str = Field(default="yt-dlp", alias="EXEC_PATH")
    fetch_timeout_seconds: Optional[float] = Field(
        default=None, alias="FETCH_TIMEOUT_SECONDS"
    )  # None = wait for the process to exit

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    # Log format: "console" (colored, human-readable) or "json" (for log aggregation)
    log_format: str = Field(default="console", alias="LOG_FORMAT")
    # Enable/disable file logging (logs/app.log and logs/error.log)
    log_file_enabled: bool = Field(default=True, alias="LOG_FILE_ENABLED")
    script_log_level: str = Field(default="INFO", alias="SCRIPT_LOG_LEVEL")

    @field_validator("dir_size_max_mb")
    @classmethod
    def validate_budget(cls, v: int) -> int:
        if v < 0:
            raise ValueError("dir_size_max_mb must not be negative")
        return v

    @field_validator("max_evictions_per_pass")
    @classmethod
    def validate_max_evictions(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_evictions_per_pass must be at least 1")
        return v

    @field_validator("audio_format")
    @classmethod
    def normalize_audio_format(cls, v: str) -> str:
        return v.lstrip(".").lower()

    @property
    def budget_bytes(self) -> int:
        """Store size budget in bytes."""
        return self.dir_size_max_mb * BYTES_PER_MB


def read_config_file(config_path: str) -> Dict[str, Any]:
    """
    Read a JSON config file and map its keys onto Settings field names.

    Unknown keys are ignored.

    Raises:
        ConfigError: If the file cannot be opened or decoded
    """
    path = Path(config_path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except OSError as e:
        raise ConfigError(f"error opening config file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"error decoding config file {path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"config file {path} must contain a JSON object")

    values: Dict[str, Any] = {}
    for key, value in raw.items():
        field_name = CONFIG_FILE_KEYS.get(key)
        if field_name is not None:
            values[field_name] = value
    return values


def load_settings(config_path: Optional[str] = None, **overrides: Any) -> Settings:
    """
    Build Settings from env, an optional JSON config file and explicit overrides.

    Overrides whose value is None are skipped so unset CLI flags fall through.

    Raises:
        ConfigError: If the config file is unreadable or values fail validation
    """
    values: Dict[str, Any] = {}
    if config_path:
        values.update(read_config_file(config_path))
    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return Settings(**values)
    except ValidationError as e:
        raise ConfigError(f"invalid configuration: {e}") from e


_config_path: Optional[str] = None
_overrides: Dict[str, Any] = {}


def configure_settings(config_path: Optional[str] = None, **overrides: Any) -> Settings:
    """
    Point get_settings() at a config file and CLI overrides.

    Clears the cached instance so every later get_settings() call sees the
    new configuration.
    """
    global _config_path, _overrides

    settings = load_settings(config_path, **overrides)
    _config_path = config_path
    _overrides = dict(overrides)
    get_settings.cache_clear()
    return settings


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Using lru_cache to ensure single instance (Singleton pattern).
    """
    config_path = _config_path or os.environ.get("CONFIG_FILE") or None
    return load_settings(config_path, **_overrides)
