"""Environment-based configuration using pydantic-settings.

Example:
    >>> from flowcase.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.flow.strict_callbacks
    True
    >>> settings.logging.level
    'INFO'

    # Or with environment variables:
    # FLOWCASE_FLOW_STRICT_CALLBACKS=false
    # FLOWCASE_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FLOWCASE_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class FlowSettings(BaseSettings):
    """Behaviour of the flow combinators."""

    model_config = SettingsConfigDict(
        env_prefix="FLOWCASE_FLOW_",
        extra="ignore",
    )

    strict_callbacks: bool = Field(
        default=True,
        description="Raise CallbackAlreadyCalled when a task completes twice (otherwise warn and ignore)",
    )
    log_absorbed: bool = Field(
        default=True,
        description="Log failures that arrive after the outer callback has fired",
    )


class FlowcaseSettings(BaseSettings):
    """Root settings for flowcase.

    Loads configuration from environment variables with FLOWCASE_ prefix.

    Example environment variables:
        FLOWCASE_DEBUG=true
        FLOWCASE_LOG_LEVEL=DEBUG
        FLOWCASE_LOG_FORMAT=json
        FLOWCASE_FLOW_STRICT_CALLBACKS=false
    """

    model_config = SettingsConfigDict(
        env_prefix="FLOWCASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    debug: bool = Field(default=False, description="Enable debug mode")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    flow: FlowSettings = Field(default_factory=FlowSettings)

    @computed_field
    @property
    def effective_log_level(self) -> str:
        """DEBUG when debug mode is on, otherwise the configured level."""
        return "DEBUG" if self.debug else self.logging.level


@lru_cache(maxsize=1)
def get_settings() -> FlowcaseSettings:
    """Get the global settings instance (cached)."""
    return FlowcaseSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    The next get_settings() call reloads configuration from the environment.
    """
    get_settings.cache_clear()
