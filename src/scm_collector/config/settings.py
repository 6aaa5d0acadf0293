"""
Configuration management for SCM Collector.
"""
import os
from pathlib import Path
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field
import yaml
from dotenv import load_dotenv


SUPPORTED_PLATFORMS = ("github", "gitlab")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class AppConfig:
    """Application-level configuration."""
    name: str = "SCM Collector"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"


@dataclass
class GitHubConfig:
    """GitHub-specific configuration."""
    api_base_url: str = "https://api.github.com"
    token: Optional[str] = None
    timeout: int = 30
    max_retries: int = 3


@dataclass
class GitLabConfig:
    """GitLab-specific configuration."""
    api_base_url: str = "https://gitlab.com/api/v4"
    token: Optional[str] = None
    timeout: int = 30
    max_retries: int = 3


@dataclass
class CollectorConfig:
    """Aggregation behaviour."""
    default_platform: str = "github"
    show_progress: bool = True
    verify_ssl: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration."""
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str = "logs/scm_collector.log"
    max_size_mb: int = 10
    backup_count: int = 5


@dataclass
class Settings:
    """Main configuration class."""
    app: AppConfig = field(default_factory=AppConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    gitlab: GitLabConfig = field(default_factory=GitLabConfig)
    collector: CollectorConfig = field(default_factory=CollectorConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load_from_file(cls, config_path: Optional[str] = None) -> "Settings":
        """Load settings from YAML file and environment variables."""
        load_dotenv()

        if config_path is None:
            config_path = os.getenv("CONFIG_FILE", "config/config.yaml")

        config_path = Path(config_path)

        config_data = {}
        if config_path.exists():
            with open(config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f) or {}

        settings = cls()

        if config_data:
            settings._update_from_dict(config_data)

        # Environment wins over the file
        settings._update_from_env()

        return settings

    def _update_from_dict(self, data: Dict[str, Any]) -> None:
        """Update settings from dictionary."""
        for section in ("app", "github", "gitlab", "collector", "logging"):
            if section in data and isinstance(data[section], dict):
                self._update_dataclass(getattr(self, section), data[section])

    def _update_from_env(self) -> None:
        """Update settings from environment variables"""
        if os.getenv("GITHUB_TOKEN"):
            self.github.token = os.getenv("GITHUB_TOKEN")

        if os.getenv("GITLAB_TOKEN"):
            self.gitlab.token = os.getenv("GITLAB_TOKEN")

        if os.getenv("SCM_PLATFORM"):
            self.collector.default_platform = os.getenv("SCM_PLATFORM").lower()

        if os.getenv("DEBUG"):
            self.app.debug = os.getenv("DEBUG").lower() in ("true", "1", "yes")

        if os.getenv("LOG_LEVEL"):
            self.app.log_level = os.getenv("LOG_LEVEL")

    @staticmethod
    def _update_dataclass(instance: Any, data: Dict[str, Any]) -> None:
        """Update a dataclass instance with dictionary data."""
        for key, value in data.items():
            if hasattr(instance, key):
                current_value = getattr(instance, key)
                if isinstance(current_value, dict) and isinstance(value, dict):
                    current_value.update(value)
                else:
                    setattr(instance, key, value)

    def token_for(self, platform: str) -> Optional[str]:
        """Return the configured access token for a platform, if any."""
        section = getattr(self, platform, None)
        if isinstance(section, (GitHubConfig, GitLabConfig)):
            return section.token
        return None

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if self.collector.default_platform not in SUPPORTED_PLATFORMS:
            errors.append(
                f"Default platform must be one of: {list(SUPPORTED_PLATFORMS)}"
            )

        for name in SUPPORTED_PLATFORMS:
            section = getattr(self, name)
            if section.timeout <= 0:
                errors.append(f"{name}.timeout must be positive")
            if section.max_retries < 0:
                errors.append(f"{name}.max_retries cannot be negative")

        if self.app.log_level.upper() not in VALID_LOG_LEVELS:
            errors.append(f"Log level must be one of: {list(VALID_LOG_LEVELS)}")

        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary for serialization."""
        return {
            "app": self.app.__dict__,
            "github": {k: v for k, v in self.github.__dict__.items() if k != "token"},
            "gitlab": {k: v for k, v in self.gitlab.__dict__.items() if k != "token"},
            "collector": self.collector.__dict__,
            "logging": self.logging.__dict__,
        }


# Global settings instance
_settings: Optional[Settings] = None


def get_settings(config_path: Optional[str] = None, reload: bool = False) -> Settings:
    """Get the global settings instance."""
    global _settings

    if _settings is None or reload:
        _settings = Settings.load_from_file(config_path)

    return _settings


def reload_settings(config_path: Optional[str] = None) -> Settings:
    """Reload settings from file."""
    return get_settings(config_path, reload=True)
