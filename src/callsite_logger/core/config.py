"""Logger configuration and environment overrides."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TAG = "CallsiteLogger"
DEFAULT_FILE_PREFIX = "CallsiteLogger_"

ENABLED_ENV = "CALLSITE_LOGGER_ENABLED"
TAG_ENV = "CALLSITE_LOGGER_TAG"
DIR_ENV = "CALLSITE_LOGGER_DIR"
PREFIX_ENV = "CALLSITE_LOGGER_FILE_PREFIX"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class LoggerConfig(BaseModel):
    """Immutable configuration for one logger handle.

    The log directory is checked when the config is built, so a bad path fails
    at startup instead of on the first write.
    """

    model_config = ConfigDict(frozen=True)

    enabled: bool = Field(default=True, description="When false, every log call is a no-op.")
    tag: str = Field(default=DEFAULT_TAG, min_length=1, description="Tag passed to the sink.")
    log_directory: Path | None = Field(
        default=None,
        description="Existing directory for hourly log files. None disables file logging.",
    )
    file_prefix: str = Field(
        default=DEFAULT_FILE_PREFIX, description="File name prefix for hourly log files."
    )

    @field_validator("log_directory")
    @classmethod
    def _check_log_directory(cls, value: Path | None) -> Path | None:
        if value is None:
            return None
        if not value.exists():
            raise ValueError(f"log directory does not exist: {value}")
        if not value.is_dir():
            raise ValueError(f"log directory must be a directory: {value}")
        return value

    @field_validator("file_prefix")
    @classmethod
    def _check_file_prefix(cls, value: str) -> str:
        if "/" in value or "\\" in value:
            raise ValueError("file_prefix must not contain path separators")
        return value

    @property
    def file_logging_enabled(self) -> bool:
        return self.log_directory is not None


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be one of: {', '.join(sorted(_TRUE | _FALSE))}")


def resolve_logger_config(cfg: LoggerConfig | None = None) -> LoggerConfig:
    """Return config with optional env overrides applied."""
    if cfg is None:
        cfg = LoggerConfig()

    overrides: dict[str, Any] = {}
    enabled = os.getenv(ENABLED_ENV)
    if enabled:
        overrides["enabled"] = _parse_bool(ENABLED_ENV, enabled)
    tag = os.getenv(TAG_ENV)
    if tag:
        overrides["tag"] = tag
    log_dir = os.getenv(DIR_ENV)
    if log_dir:
        overrides["log_directory"] = Path(log_dir).expanduser()
    prefix = os.getenv(PREFIX_ENV)
    if prefix:
        overrides["file_prefix"] = prefix

    if not overrides:
        return cfg
    # model_copy() skips validation; rebuild so the directory is checked again.
    return LoggerConfig.model_validate({**cfg.model_dump(), **overrides})
