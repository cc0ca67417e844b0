"""Configuration, errors and logging setup."""

from .config import ReportConfig
from .config_error import (
    ConfigFileNotFoundError,
    ConfigParseError,
    ConfigurationError,
    ConfigValidationError,
)
from .logging_setup import setup_logging

__all__ = [
    "ConfigFileNotFoundError",
    "ConfigParseError",
    "ConfigValidationError",
    "ConfigurationError",
    "ReportConfig",
    "setup_logging",
]
