"""
Configuration management for topiclookup.

Values are merged, lowest priority first, from:
- Built-in defaults
- An optional YAML configuration file
- Environment variables
"""

import copy
import os
from typing import Any, Dict, Optional

import yaml

DEFAULTS: Dict[str, Any] = {
    "lookup": {
        "service_url": "http://localhost:8080",
        "use_tls": False,
        "read_timeout_ms": 60000,
        "max_concurrent_lookups": None,
    },
    "logging": {
        "level": "INFO",
        "format": "json",
    },
}

_TRUE_VALUES = {"1", "true", "yes", "on"}


def parse_bool(value: Any) -> bool:
    """
    Interpret a flag read from YAML or the environment.

    Strings are matched against the usual truthy spellings (1, true, yes,
    on), so a quoted 'false' is False.
    """
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return bool(value)


class Config:
    """Configuration manager for topiclookup."""

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_file: Optional path to a YAML configuration file
        """
        self._config: Dict[str, Any] = copy.deepcopy(DEFAULTS)

        if config_file:
            self._load_config_file(config_file)

        self._apply_env_overrides()

    def _load_config_file(self, config_file: str) -> None:
        """
        Load configuration from YAML file.

        Args:
            config_file: Path to YAML configuration file
        """
        with open(config_file, "r") as f:
            file_config = yaml.safe_load(f) or {}
            if not isinstance(file_config, dict):
                raise ValueError(f"Configuration file {config_file} must contain a mapping")
            self._merge_config(file_config)

    def _merge_config(self, new_config: Dict[str, Any]) -> None:
        self._config = self._deep_merge(self._config, new_config)

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """
        Deep merge two dictionaries.

        Args:
            base: Base dictionary
            override: Override dictionary

        Returns:
            Merged dictionary
        """
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides."""
        if service_url := os.getenv("LOOKUP_SERVICE_URL"):
            self.set("lookup.service_url", service_url)

        if use_tls := os.getenv("LOOKUP_USE_TLS"):
            self.set("lookup.use_tls", parse_bool(use_tls))

        if read_timeout_ms := os.getenv("LOOKUP_READ_TIMEOUT_MS"):
            self.set("lookup.read_timeout_ms", int(read_timeout_ms))

        if max_lookups := os.getenv("LOOKUP_MAX_CONCURRENT_LOOKUPS"):
            self.set("lookup.max_concurrent_lookups", int(max_lookups))

        if log_level := os.getenv("LOG_LEVEL"):
            self.set("logging.level", log_level)

        if log_format := os.getenv("LOG_FORMAT"):
            self.set("logging.format", log_format)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key: Configuration key in dot notation (e.g., "lookup.use_tls")
            default: Default value if key not found

        Returns:
            Configuration value
        """
        value = self._config
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value using dot notation.

        Args:
            key: Configuration key in dot notation
            value: Value to set
        """
        keys = key.split(".")
        config = self._config
        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]
        config[keys[-1]] = value

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._config)


# Global configuration instance
_config: Optional[Config] = None


def get_config(config_file: Optional[str] = None) -> Config:
    """
    Get global configuration instance.

    Args:
        config_file: Optional configuration file path, used on first call

    Returns:
        Configuration instance
    """
    global _config
    if _config is None:
        _config = Config(config_file)
    return _config


def reset_config() -> None:
    """Reset global configuration (mainly for testing)."""
    global _config
    _config = None
