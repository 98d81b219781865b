"""
Utilities Package

Error types and logging setup shared by the knife config packages.
"""

from .errors import (
    ConfigError,
    ConfigNotFoundError,
    ConfigParseError,
    KeyLoadError,
    KnifeError,
)
from .logging import get_logger, setup_logging, setup_logging_from_settings

__all__ = [
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigParseError",
    "KeyLoadError",
    "KnifeError",
    "get_logger",
    "setup_logging",
    "setup_logging_from_settings",
]
