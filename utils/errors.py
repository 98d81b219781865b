"""
Custom exception classes for knife configuration handling.

These provide a hierarchy of typed exceptions for better error handling.
"""

from __future__ import annotations

from pathlib import Path


class KnifeError(Exception):
    """Base exception for knife configuration errors."""

    pass


class ConfigError(KnifeError):
    """Exception raised for configuration-related errors."""

    pass


class ConfigNotFoundError(ConfigError):
    """Raised when a knife.rb file does not exist or cannot be read."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        super().__init__(message)
        self.path = str(path) if path is not None else None


class ConfigParseError(ConfigError):
    """Raised when a line matches none of the recognized declaration shapes."""

    def __init__(
        self,
        reason: str,
        *,
        source: str = "<string>",
        line_number: int | None = None,
        line: str | None = None,
    ) -> None:
        self.reason = reason
        self.source = source
        self.line_number = line_number
        self.line = line

        location = source if line_number is None else f"{source}:{line_number}"
        message = f"{location}: {reason}"
        if line is not None:
            message += f": {line!r}"
        super().__init__(message)


class KeyLoadError(KnifeError):
    """Raised when a PEM private key cannot be read or is not an RSA key."""

    pass
