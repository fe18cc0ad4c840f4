# ProxySpec
# Copyright (C) 2025 Amirreza "Farnam" Taheri
# This program comes with ABSOLUTELY NO WARRANTY; for details type `show w`.
# This is free software, and you are welcome to redistribute it
# under certain conditions; type `show c` for details.

"""Settings read from the environment.

``GOST_PROFILING``, ``GOST_METRICS``, ``GOST_LOGGER_LEVEL`` and
``GOST_API`` become the matching singleton sections of the compiled
configuration. ``GOST_LOG_LEVEL`` and ``GOST_MASK_SENSITIVE`` control
the logging of the command-line tool itself.
"""
from __future__ import annotations

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..constants import DEFAULT_LOG_LEVEL, ENV_PREFIX, LOG_LEVELS
from .base import BaseConfig


class Settings(BaseSettings):
    """
    Main application configuration model.
    """

    profiling: Optional[str] = Field(
        None, description="Listen address of the profiling server."
    )
    metrics: Optional[str] = Field(
        None, description="Listen address of the metrics server."
    )
    logger_level: Optional[str] = Field(
        None, description="Log level written into the compiled configuration."
    )
    api: Optional[str] = Field(None, description="Listen address of the web API.")
    log_level: str = Field(DEFAULT_LOG_LEVEL, description="Log level of this tool.")
    mask_sensitive: bool = Field(
        True, description="Mask credentials in log messages."
    )

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, case_sensitive=False)

    @field_validator("profiling", "metrics", "logger_level", "api", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        """Treat empty variables as unset."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _known_log_level(cls, value):
        """Unknown level names fall back to the default level."""
        level = str(value or "").strip().upper()
        return level if level in LOG_LEVELS else DEFAULT_LOG_LEVEL


__all__ = ["BaseConfig", "Settings"]
