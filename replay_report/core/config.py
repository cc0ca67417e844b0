#!/usr/bin/env python3
"""
Configuration for the report plugin.

Settings can come from environment variables (``ReportConfig.from_env``)
or from a YAML file (``ReportConfig.from_yaml``). Reporting is optional:
without a webhook URL the plugin still keeps its audit trail but report
submissions are skipped.
"""

import os
from dataclasses import asdict, dataclass, fields
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import yaml

from .config_error import ConfigFileNotFoundError, ConfigParseError, ConfigValidationError

DEFAULT_PROFILE_URL_TEMPLATE = "https://steamcommunity.com/profiles/{guid}"


@dataclass
class ReportConfig:
    """
    Report plugin settings.

    The clip duration doubles as the audit retention window, so a report
    always carries the events that happened while its clip was recorded.
    """
    webhook_url: Optional[str] = None
    clip_duration_seconds: int = 30
    reports_dir: str = "reports"
    server_name: str = "AssettoServer"
    profile_url_template: str = DEFAULT_PROFILE_URL_TEMPLATE
    webhook_timeout_seconds: float = 30.0

    def __post_init__(self):
        # Empty strings from env/YAML mean "not configured"
        if self.webhook_url is not None and not self.webhook_url.strip():
            self.webhook_url = None

    @property
    def retention(self) -> timedelta:
        """How long audit events stay in the ledger."""
        return timedelta(seconds=self.clip_duration_seconds)

    @property
    def webhook_enabled(self) -> bool:
        return self.webhook_url is not None

    def validate(self) -> "ReportConfig":
        """Check values, raising ConfigValidationError listing every bad field."""
        invalid = []

        if not isinstance(self.clip_duration_seconds, int) or self.clip_duration_seconds <= 0:
            invalid.append("clip_duration_seconds")

        if self.webhook_url is not None:
            parsed = urlparse(self.webhook_url)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                invalid.append("webhook_url")

        if self.webhook_timeout_seconds <= 0:
            invalid.append("webhook_timeout_seconds")

        if "{guid}" not in self.profile_url_template:
            invalid.append("profile_url_template")

        if not self.reports_dir:
            invalid.append("reports_dir")

        if invalid:
            raise ConfigValidationError(
                f"Invalid report configuration: {', '.join(invalid)}",
                invalid_fields=invalid,
            )
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReportConfig":
        """Create from a mapping, ignoring keys that are not settings."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    @classmethod
    def from_env(cls) -> "ReportConfig":
        """Create configuration from environment variables.

        Environment variables:
            REPORT_WEBHOOK_URL: Discord-compatible webhook for reports
            REPORT_CLIP_DURATION: Clip length / audit retention in seconds (default: 30)
            REPORT_DIR: Directory holding report artifacts (default: reports)
            REPORT_SERVER_NAME: Name shown as the webhook sender
            REPORT_WEBHOOK_TIMEOUT: Upload timeout in seconds (default: 30)
        """
        try:
            duration = int(os.getenv("REPORT_CLIP_DURATION", "30"))
            timeout = float(os.getenv("REPORT_WEBHOOK_TIMEOUT", "30"))
        except ValueError as e:
            raise ConfigValidationError(f"Invalid numeric report setting: {e}") from e

        return cls(
            webhook_url=os.getenv("REPORT_WEBHOOK_URL"),
            clip_duration_seconds=duration,
            reports_dir=os.getenv("REPORT_DIR", "reports"),
            server_name=os.getenv("REPORT_SERVER_NAME", "AssettoServer"),
            webhook_timeout_seconds=timeout,
        )

    @classmethod
    def from_yaml(cls, config_path: str) -> "ReportConfig":
        """Load settings from a YAML mapping."""
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigFileNotFoundError(config_path)

        try:
            with open(config_file, "r") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigParseError(config_path, str(e)) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigParseError(config_path, "top-level value must be a mapping")

        return cls.from_dict(data)
