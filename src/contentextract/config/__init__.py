"""Configuration models and the lazily loaded global settings."""

from .config import (
    Config,
    ExtractionSettings,
    FetchConfig,
    LazyConfig,
    MonitoringConfig,
    find_config_file,
    settings,
)

__all__ = [
    "Config",
    "ExtractionSettings",
    "FetchConfig",
    "LazyConfig",
    "MonitoringConfig",
    "find_config_file",
    "settings",
]
