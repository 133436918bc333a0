"""Configuration exceptions: invalid values and unreadable config files."""

from pathlib import Path
from typing import Any

from .base import SnapshotterError


class ConfigurationError(SnapshotterError):
    """Base class for configuration-related errors."""

    pass


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value!r}",
            details={"key": key, "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class ConfigFileError(ConfigurationError):
    """Raised when a configuration file exists but cannot be loaded."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Cannot load config file: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason
