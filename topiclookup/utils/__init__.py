"""Logging and configuration utilities."""

from topiclookup.utils.config import Config, get_config, reset_config
from topiclookup.utils.logging import configure_logging, get_logger

__all__ = [
    "Config",
    "get_config",
    "reset_config",
    "configure_logging",
    "get_logger",
]
