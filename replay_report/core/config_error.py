#!/usr/bin/env python3
"""
config_error.py: Configuration errors for the report plugin

Raised instead of exiting so a host can decide whether bad report
settings disable reporting or abort startup.
"""

from typing import List, Optional


class ConfigurationError(Exception):
    """Base exception for report configuration problems."""

    def __init__(self, message: str, config_path: Optional[str] = None, details: Optional[dict] = None):
        self.config_path = config_path
        self.details = details or {}
        super().__init__(message)


class ConfigFileNotFoundError(ConfigurationError):
    """The YAML settings file does not exist."""

    def __init__(self, config_path: str):
        super().__init__(f"Report configuration not found: {config_path}", config_path=config_path)


class ConfigParseError(ConfigurationError):
    """The YAML settings file exists but is not a valid mapping."""

    def __init__(self, config_path: str, parse_error: str):
        super().__init__(
            f"Could not read report configuration {config_path}: {parse_error}",
            config_path=config_path,
            details={"parse_error": parse_error},
        )


class ConfigValidationError(ConfigurationError):
    """One or more settings have values the plugin cannot use."""

    def __init__(self, message: str, invalid_fields: Optional[List[str]] = None):
        self.invalid_fields = invalid_fields or []
        super().__init__(message, details={"invalid_fields": self.invalid_fields} if invalid_fields else None)
