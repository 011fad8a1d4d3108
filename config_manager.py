"""
Configuration management for the swap matching service.

Settings come from three layers, later ones winning: built-in defaults,
the JSON config file, then environment variables.
"""

import os
import json
import logging
from copy import deepcopy
from pathlib import Path
from typing import Any, Callable, Dict, Tuple
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class AppConfig:
    """Flask server settings."""
    host: str
    port: int
    debug: bool


@dataclass
class MatchingConfig:
    """Recommendation endpoint settings."""
    default_limit: int
    recommendations_per_minute: int


@dataclass
class PathsConfig:
    """Where the JSON store lives."""
    data_dir: str


DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    "app": {"host": "0.0.0.0", "port": 22582, "debug": False},
    "matching": {"default_limit": 20, "recommendations_per_minute": 10},
    "paths": {"data_dir": "data"},
}


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


# env var -> (section, key, parser)
ENV_OVERRIDES: Dict[str, Tuple[str, str, Callable[[str], Any]]] = {
    "APP_HOST": ("app", "host", str),
    "APP_PORT": ("app", "port", int),
    "APP_DEBUG": ("app", "debug", _parse_bool),
    "MATCHING_DEFAULT_LIMIT": ("matching", "default_limit", int),
    "RECOMMENDATIONS_PER_MINUTE": ("matching", "recommendations_per_minute", int),
    "MATCHING_DATA_DIR": ("paths", "data_dir", str),
}


class ConfigManager:
    """Loads the layered configuration and hands out typed sections."""

    def __init__(self, config_file: str = "matching_config.json"):
        self.config_file = Path(config_file)
        self._config: Dict[str, Dict[str, Any]] = {}
        self._load_config()

    def _load_config(self) -> None:
        config = deepcopy(DEFAULT_CONFIG)

        for section, values in self._read_file().items():
            if isinstance(values, dict):
                config.setdefault(section, {}).update(values)

        for env_name, (section, key, parse) in ENV_OVERRIDES.items():
            raw = os.getenv(env_name)
            if raw:
                config[section][key] = parse(raw)

        self._validate(config)
        self._config = config

    def _read_file(self) -> Dict[str, Any]:
        if not self.config_file.exists():
            return {}
        try:
            data = json.loads(self.config_file.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            logger.warning(f"Ignoring invalid config file {self.config_file}: {exc}")
            return {}
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _validate(config: Dict[str, Dict[str, Any]]) -> None:
        matching = config["matching"]
        if not 1 <= int(matching["default_limit"]) <= 50:
            raise ValueError("matching.default_limit must be between 1 and 50")
        if int(matching["recommendations_per_minute"]) < 1:
            raise ValueError("matching.recommendations_per_minute must be positive")

    def get_app_config(self) -> AppConfig:
        app = self._config["app"]
        return AppConfig(host=app["host"], port=int(app["port"]), debug=bool(app["debug"]))

    def get_matching_config(self) -> MatchingConfig:
        matching = self._config["matching"]
        return MatchingConfig(
            default_limit=int(matching["default_limit"]),
            recommendations_per_minute=int(matching["recommendations_per_minute"]),
        )

    def get_paths_config(self) -> PathsConfig:
        return PathsConfig(data_dir=str(self._config["paths"]["data_dir"]))

    def get_config(self) -> Dict[str, Any]:
        """Get a copy of the raw configuration dictionary."""
        return deepcopy(self._config)

    def reload(self) -> None:
        self._load_config()

    def save_config(self) -> None:
        """Write the current configuration to the config file."""
        self.config_file.write_text(
            json.dumps(self._config, indent=2, ensure_ascii=False), encoding="utf-8"
        )


# Global configuration instance
config_manager = ConfigManager()


def get_app_config() -> AppConfig:
    return config_manager.get_app_config()


def get_matching_config() -> MatchingConfig:
    return config_manager.get_matching_config()


def get_paths_config() -> PathsConfig:
    return config_manager.get_paths_config()


def reload_config() -> None:
    config_manager.reload()


def save_config() -> None:
    config_manager.save_config()
