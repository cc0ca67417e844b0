#!/usr/bin/env python3
"""
Webhook message structures.

Mirrors the subset of the Discord webhook execute payload the plugin
sends: a sender name and rich embeds, with mentions disabled.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

REPORT_COLOR_RED = 0xFF0000


@dataclass
class EmbedAuthor:
    name: str
    url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"name": self.name}
        if self.url:
            data["url"] = self.url
        return data


@dataclass
class EmbedFooter:
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text}


@dataclass
class Embed:
    """One rich section of a webhook message."""
    title: str
    description: str = ""
    color: int = REPORT_COLOR_RED
    timestamp: Optional[datetime] = None
    author: Optional[EmbedAuthor] = None
    footer: Optional[EmbedFooter] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the webhook JSON shape."""
        data: Dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "color": self.color,
        }
        if self.timestamp is not None:
            data["timestamp"] = self.timestamp.isoformat()
        if self.author is not None:
            data["author"] = self.author.to_dict()
        if self.footer is not None:
            data["footer"] = self.footer.to_dict()
        return data


@dataclass
class WebhookMessage:
    """Structured webhook message."""
    username: str
    embeds: List[Embed] = field(default_factory=list)
    content: str = ""
    # Empty parse list: nothing in the message can ping anyone
    allowed_mentions: Dict[str, List[str]] = field(default_factory=lambda: {"parse": []})

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "username": self.username,
            "embeds": [embed.to_dict() for embed in self.embeds],
            "allowed_mentions": self.allowed_mentions,
        }
        if self.content:
            data["content"] = self.content
        return data


class ReportStatus(str, Enum):
    """How a report submission ended."""

    SENT = "sent"
    SKIPPED = "skipped"  # No webhook configured
    FAILED = "failed"


@dataclass(frozen=True)
class ReportOutcome:
    """Result of a report submission, returned to the caller."""
    status: ReportStatus
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        """True unless delivery was attempted and failed."""
        return self.status != ReportStatus.FAILED

    @classmethod
    def sent(cls) -> "ReportOutcome":
        return cls(ReportStatus.SENT)

    @classmethod
    def skipped(cls) -> "ReportOutcome":
        return cls(ReportStatus.SKIPPED)

    @classmethod
    def failed(cls, error: str) -> "ReportOutcome":
        return cls(ReportStatus.FAILED, error)
