# configloader/errors.py

"""Exceptions raised by configloader."""

from pathlib import Path
from typing import Optional


class ConfigLoaderError(Exception):
    """Base exception for all recoverable configuration loading errors."""

    pass


class ConfigFileReadError(ConfigLoaderError):
    """Raised when a config file exists but cannot be read."""

    def __init__(self, path: Optional[Path], message: str):
        self.path = path
        super().__init__(f"[{path}] {message}" if path else message)


class ConfigParseError(ConfigFileReadError):
    """Raised when a config file has malformed YAML, JSON or TOML syntax."""

    pass


class ConfigDecodeError(ConfigLoaderError):
    """Raised when merged values cannot be decoded into a Configuration."""

    pass


class ConfigNotInitializedError(RuntimeError):
    """
    Raised when the current configuration is requested before a successful
    initialization. This signals a startup-ordering bug, not a condition
    callers are expected to recover from.
    """

    pass


__all__ = [
    "ConfigLoaderError",
    "ConfigFileReadError",
    "ConfigParseError",
    "ConfigDecodeError",
    "ConfigNotInitializedError",
]
