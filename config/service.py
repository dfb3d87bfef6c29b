"""Configuration service facade for simplified configuration access.

Implements the Facade pattern to provide a clean, simple interface
to the configuration system.
"""
from __future__ import annotations

from typing import Any, Optional

from config.config import AppConfig, ConfigLoader


class ConfigurationService:
    """Facade for application configuration management.

    Provides flat access to configuration values; all properties delegate to
    the underlying AppConfig instance.

    Example:
        config_service = ConfigurationService(config)
        engine = config_service.engine  # Instead of config.speech.engine
    """

    def __init__(self, config: AppConfig):
        self._config = config

    # Speech configuration shortcuts
    @property
    def engine(self) -> str:
        return self._config.speech.engine

    @property
    def model_path(self) -> Optional[str]:
        return self._config.speech.model_path

    @property
    def language(self) -> str:
        return self._config.speech.language

    @property
    def sample_rate(self) -> int:
        return self._config.speech.sample_rate

    # Storage configuration
    @property
    def workouts_path(self) -> str:
        """Get Excel workout log path."""
        return self._config.storage.workouts_path

    @property
    def custom_exercises_path(self) -> str:
        return self._config.storage.custom_exercises_path

    @property
    def session_log_dir(self) -> str:
        return self._config.storage.session_log_dir

    @property
    def builtin_catalog_path(self) -> Optional[str]:
        """Get the builtin catalog override, None for the shipped catalog."""
        return self._config.catalog.builtin_path

    # General configuration
    @property
    def debug(self) -> bool:
        return self._config.debug

    @property
    def log_level(self) -> str:
        return self._config.log_level

    @property
    def raw_config(self) -> AppConfig:
        """Underlying AppConfig instance for direct access."""
        return self._config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary for serialization."""
        return {
            "speech": {
                "engine": self.engine,
                "model_path": self.model_path,
                "language": self.language,
                "sample_rate": self.sample_rate,
            },
            "storage": {
                "workouts_path": self.workouts_path,
                "custom_exercises_path": self.custom_exercises_path,
                "session_log_dir": self.session_log_dir,
            },
            "catalog": {
                "builtin_path": self.builtin_catalog_path,
            },
            "debug": self.debug,
            "log_level": self.log_level,
        }


class ConfigurationServiceFactory:
    """Static factory methods for common ConfigurationService creation patterns."""

    @staticmethod
    def create_from_args(args: list[str]) -> tuple[ConfigurationService, list[str]]:
        """Create configuration service from command-line arguments.

        Returns:
            Tuple of (ConfigurationService, unknown_args)
        """
        loader = ConfigLoader()
        config, unknown_args = loader.load(args)
        return ConfigurationService(config), unknown_args

    @staticmethod
    def create_from_config(config: AppConfig) -> ConfigurationService:
        return ConfigurationService(config)

    @staticmethod
    def create_default() -> ConfigurationService:
        """Create configuration service with defaults, file and environment applied."""
        loader = ConfigLoader()
        config, _ = loader.load([])
        return ConfigurationService(config)
