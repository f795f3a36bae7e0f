"""Configuration loaded from FLOWCASE_* environment variables."""

from .settings import FlowcaseSettings, FlowSettings, LoggingSettings, clear_settings_cache, get_settings

__all__ = ["FlowcaseSettings", "FlowSettings", "LoggingSettings", "get_settings", "clear_settings_cache"]
