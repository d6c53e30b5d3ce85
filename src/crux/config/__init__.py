"""Configuration models and the lazily loaded global settings."""

from .config import (
    Config,
    ExtractionSettings,
    FetchConfig,
    LazyConfig,
    MonitoringConfig,
    PostprocessSettings,
    ScoringSettings,
    find_config_file,
    settings,
)

__all__ = [
    "Config",
    "ExtractionSettings",
    "FetchConfig",
    "LazyConfig",
    "MonitoringConfig",
    "PostprocessSettings",
    "ScoringSettings",
    "find_config_file",
    "settings",
]
