"""Configuration error definitions."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when configuration values are invalid."""


class InvalidTargetsFileError(ConfigurationError):
    """Raised when the targets file cannot be read or has an invalid shape."""
