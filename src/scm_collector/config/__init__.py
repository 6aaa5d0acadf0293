"""Configuration management module."""

from .settings import (
    Settings,
    AppConfig,
    GitHubConfig,
    GitLabConfig,
    CollectorConfig,
    LoggingConfig,
    SUPPORTED_PLATFORMS,
    get_settings,
    reload_settings,
)

__all__ = [
    "Settings",
    "AppConfig",
    "GitHubConfig",
    "GitLabConfig",
    "CollectorConfig",
    "LoggingConfig",
    "SUPPORTED_PLATFORMS",
    "get_settings",
    "reload_settings",
]
