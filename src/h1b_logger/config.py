"""
Logger Configuration.

Resolution order for every field:
    1. explicit caller-supplied value
    2. environment default (``LOG_LEVEL``), read once via ``get_settings``
    3. hardcoded fallback
"""

from __future__ import annotations

from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any, TypedDict

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SERVICE = "h1b-logger"
DEFAULT_LEVEL = "info"
DEFAULT_MAX_SIZE = "10m"
DEFAULT_MAX_FILES = "14d"


def _default_log_dir() -> Path:
    return Path.cwd() / "logs"


class LoggingSettings(BaseSettings):
    """
    Environment-derived logging defaults.
    Prefix: LOG_
    """

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    level: str | None = Field(default=None, description="Default minimum severity level")


@lru_cache(maxsize=1)
def get_settings() -> LoggingSettings:
    """Environment defaults, read on first use and reused afterwards."""
    return LoggingSettings()


class LoggerConfig(BaseModel):
    """Complete, immutable logger configuration."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    service: str = Field(default=DEFAULT_SERVICE, description="Service name attached to every record")
    level: str = Field(default=DEFAULT_LEVEL, description="Minimum severity (debug, info, warn, error)")
    log_dir: Path = Field(default_factory=_default_log_dir, description="Directory for the rotating file sink")
    max_size: str = Field(default=DEFAULT_MAX_SIZE, description="Size at which the active log file rotates")
    max_files: str = Field(default=DEFAULT_MAX_FILES, description="Retention: '<N>d' for age, '<N>' for count")
    test: bool = Field(default=False, description="Test mode, never builds a durable sink")


class LoggerConfigOverrides(TypedDict, total=False):
    service: str
    level: str
    log_dir: str | Path
    max_size: str
    max_files: str
    test: bool


def _explicit_fields(overrides: LoggerConfig | Mapping[str, Any] | None) -> dict[str, Any]:
    if overrides is None:
        return {}
    if isinstance(overrides, LoggerConfig):
        return overrides.model_dump()
    return {key: value for key, value in overrides.items() if value is not None}


def resolve_config(
    overrides: LoggerConfig | Mapping[str, Any] | None = None,
    *,
    settings: LoggingSettings | None = None,
    **fields: Any,
) -> LoggerConfig:
    """
    Produce a complete LoggerConfig from partial input.

    Keyword ``fields`` take precedence over ``overrides``. The level string
    is not validated; unknown levels are handled (fail open) when filtering.
    """
    settings = settings if settings is not None else get_settings()

    values: dict[str, Any] = {}
    if settings.level:
        values["level"] = settings.level
    values.update(_explicit_fields(overrides))
    values.update({key: value for key, value in fields.items() if value is not None})
    return LoggerConfig.model_validate(values)
