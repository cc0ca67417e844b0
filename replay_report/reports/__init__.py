"""
Report delivery.

- ReportDispatcher: sanitized webhook message + replay attachments
- DiscordWebhookTransport: aiohttp multipart delivery
- ArtifactStore: <guid>.zip / <guid>.json under the reports directory
- ReportWorker: background loop so event threads never block on I/O
"""

from .artifacts import ArtifactStore
from .dispatcher import ReportDispatcher
from .models import Embed, EmbedAuthor, EmbedFooter, ReportOutcome, ReportStatus, WebhookMessage
from .transport import DiscordWebhookTransport, TransportError, WebhookTransport, create_transport
from .worker import ReportWorker, WorkerClosedError

__all__ = [
    "ArtifactStore",
    "DiscordWebhookTransport",
    "Embed",
    "EmbedAuthor",
    "EmbedFooter",
    "ReportDispatcher",
    "ReportOutcome",
    "ReportStatus",
    "ReportWorker",
    "TransportError",
    "WebhookMessage",
    "WebhookTransport",
    "WorkerClosedError",
    "create_transport",
]
