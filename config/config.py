"""Hierarchical configuration loading and validation.

Implements a configuration system with the following precedence:
1. Default values (lowest priority)
2. JSON settings file (config/settings.json)
3. Environment variables
4. Command-line arguments (highest priority)

Configuration is deep-merged across all sources, allowing partial overrides
at any level of the configuration hierarchy.
"""
from __future__ import annotations

import argparse
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from core.exceptions import ConfigurationError

SPEECH_ENGINES = ("vosk",)
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True)
class SpeechConfig:
    """Speech capture configuration.

    Attributes:
        engine: Speech capture engine name
        model_path: Optional path to an offline model directory
        language: Recognition language code
        sample_rate: Microphone sample rate in Hz
    """
    engine: str = "vosk"
    model_path: Optional[str] = None
    language: str = "en-US"
    sample_rate: int = 16000

    def __post_init__(self):
        if self.engine not in SPEECH_ENGINES:
            raise ConfigurationError(f"Invalid engine: {self.engine}")
        if not isinstance(self.sample_rate, int) or self.sample_rate <= 0:
            raise ConfigurationError(f"Invalid sample_rate: {self.sample_rate}")


@dataclass(frozen=True)
class StorageConfig:
    """Where workouts, custom exercises and session logs live."""
    workouts_path: str = "data/workouts.xlsx"
    custom_exercises_path: str = "data/custom_exercises.json"
    session_log_dir: str = "logs/sessions"


@dataclass(frozen=True)
class CatalogConfig:
    """Builtin exercise catalog source.

    Attributes:
        builtin_path: Alternative catalog JSON; None uses the shipped catalog
    """
    builtin_path: Optional[str] = None


@dataclass(frozen=True)
class AppConfig:
    """Complete application configuration."""
    speech: SpeechConfig
    storage: StorageConfig
    catalog: CatalogConfig

    debug: bool = False
    log_level: str = "INFO"

    def __post_init__(self):
        if self.log_level not in LOG_LEVELS:
            raise ConfigurationError(f"Invalid log_level: {self.log_level}")


class ConfigLoader:
    """Loads configuration with precedence and deep merging of nested sections."""

    def __init__(self, config_dir: Path = Path("config"), settings_file: str = "settings.json"):
        self.config_dir = Path(config_dir)
        self.settings_file = settings_file

    def load(self, argv: List[str]) -> Tuple[AppConfig, List[str]]:
        """Load configuration with proper hierarchy: defaults → file → env → CLI.

        Args:
            argv: Command-line arguments to parse

        Returns:
            Tuple of (AppConfig instance, unknown CLI arguments)
        """
        # 1. Start with defaults
        config_dict = self._get_defaults()

        # 2. Settings file (deep merge)
        self._deep_update(config_dict, self._load_settings_file())

        # 3. Environment variables (deep merge)
        self._deep_update(config_dict, self._load_env_overrides())

        # 4. CLI arguments (highest priority, deep merge)
        cli_overrides, unknown_args = self._parse_cli_args(argv)
        self._deep_update(config_dict, cli_overrides)

        # 5. Build and validate final config
        return self._build_config(config_dict), unknown_args

    def _get_defaults(self) -> Dict[str, Any]:
        return {
            "speech": {
                "engine": "vosk",
                "model_path": None,
                "language": "en-US",
                "sample_rate": 16000,
            },
            "storage": {
                "workouts_path": "data/workouts.xlsx",
                "custom_exercises_path": "data/custom_exercises.json",
                "session_log_dir": "logs/sessions",
            },
            "catalog": {
                "builtin_path": None,
            },
            "debug": False,
            "log_level": "INFO",
        }

    def _load_settings_file(self) -> Dict[str, Any]:
        """Load the JSON settings file; a missing file means no overrides.

        Raises:
            ConfigurationError: If the file exists but cannot be parsed
        """
        file_path = self.config_dir / self.settings_file
        if not file_path.exists():
            return {}
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            raise ConfigurationError(f"Failed to load {file_path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"{file_path} must contain a JSON object")
        return data

    def _load_env_overrides(self) -> Dict[str, Any]:
        """Load configuration overrides from environment variables.

        Supported environment variables:
        - WORKOUT_DATA_DIR: Directory holding workouts.xlsx and custom_exercises.json
        - SPEECH_ENGINE: Speech capture engine
        - SPEECH_MODEL_PATH: Offline model directory
        - DEBUG: Enable debug mode
        - LOG_LEVEL: Set logging level
        """
        overrides: Dict[str, Any] = {}

        data_dir = os.getenv("WORKOUT_DATA_DIR")
        if data_dir:
            storage_overrides = overrides.setdefault("storage", {})
            storage_overrides["workouts_path"] = str(Path(data_dir) / "workouts.xlsx")
            storage_overrides["custom_exercises_path"] = str(Path(data_dir) / "custom_exercises.json")

        speech_engine = os.getenv("SPEECH_ENGINE")
        if speech_engine:
            overrides.setdefault("speech", {})["engine"] = speech_engine.strip().lower()

        model_path = os.getenv("SPEECH_MODEL_PATH")
        if model_path:
            overrides.setdefault("speech", {})["model_path"] = model_path

        if self._env_bool("DEBUG"):
            overrides["debug"] = True

        log_level = os.getenv("LOG_LEVEL")
        if log_level:
            overrides["log_level"] = log_level.upper()

        return overrides

    @staticmethod
    def build_arg_parser(add_help: bool = True) -> argparse.ArgumentParser:
        """Global configuration flags, shared with the command-line interface."""
        parser = argparse.ArgumentParser(description="Voice workout log", add_help=add_help, allow_abbrev=False)
        parser.add_argument("--engine", choices=list(SPEECH_ENGINES), help="Speech capture engine")
        parser.add_argument("--model-path", help="Offline speech model directory")
        parser.add_argument("--data-dir", help="Directory for workouts and custom exercises")
        parser.add_argument("--debug", action="store_true", help="Enable debug mode")
        parser.add_argument("--log-level", choices=list(LOG_LEVELS), help="Set logging level")
        return parser

    def _parse_cli_args(self, argv: List[str]) -> Tuple[Dict[str, Any], List[str]]:
        parser = self.build_arg_parser(add_help=False)
        known, unknown = parser.parse_known_args(argv)

        overrides: Dict[str, Any] = {}
        if known.engine:
            overrides.setdefault("speech", {})["engine"] = known.engine
        if known.model_path:
            overrides.setdefault("speech", {})["model_path"] = known.model_path
        if known.data_dir:
            storage_overrides = overrides.setdefault("storage", {})
            storage_overrides["workouts_path"] = str(Path(known.data_dir) / "workouts.xlsx")
            storage_overrides["custom_exercises_path"] = str(Path(known.data_dir) / "custom_exercises.json")
        if known.debug:
            overrides["debug"] = True
        if known.log_level:
            overrides["log_level"] = known.log_level

        return overrides, unknown

    def _build_config(self, config_dict: Dict[str, Any]) -> AppConfig:
        """Build and validate the final configuration object.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        try:
            speech_config = SpeechConfig(**config_dict.get("speech", {}))
            storage_config = StorageConfig(**config_dict.get("storage", {}))
            catalog_config = CatalogConfig(**config_dict.get("catalog", {}))
        except TypeError as e:
            raise ConfigurationError(f"Unknown configuration key: {e}") from e

        return AppConfig(
            speech=speech_config,
            storage=storage_config,
            catalog=catalog_config,
            debug=bool(config_dict.get("debug", False)),
            log_level=str(config_dict.get("log_level", "INFO")).upper(),
        )

    @staticmethod
    def _env_bool(name: str, default: bool = False) -> bool:
        """Parse boolean from environment variable ("1", "true", "yes", "y", "on")."""
        val = os.getenv(name)
        if val is None:
            return default
        return val.strip().lower() in {"1", "true", "yes", "y", "on"}

    @staticmethod
    def _deep_update(target: Dict[str, Any], updates: Dict[str, Any]) -> None:
        """Recursively update mapping 'target' with 'updates' without clobbering nested dicts."""
        for key, new_val in updates.items():
            if isinstance(new_val, dict) and isinstance(target.get(key), dict):
                ConfigLoader._deep_update(target[key], new_val)  # type: ignore[index]
            else:
                target[key] = new_val


def parse_app_args(argv: List[str]) -> Tuple[AppConfig, List[str]]:
    """Load configuration with a default ConfigLoader."""
    return ConfigLoader().load(argv)


__all__ = ["AppConfig", "SpeechConfig", "StorageConfig", "CatalogConfig", "ConfigLoader", "parse_app_args"]
