#!/usr/bin/env python3
"""
Report Dispatcher

Turns a report (client, replay, reason) into a sanitized webhook message
with the replay's clip and metadata attached, and delivers it.
"""

import logging
from typing import Any, Optional

from ..audit.models import Replay
from ..audit.sanitizer import escape_markup, normalize_display_name
from ..core.config import DEFAULT_PROFILE_URL_TEMPLATE
from .artifacts import ArtifactStore
from .models import Embed, EmbedAuthor, EmbedFooter, ReportOutcome, WebhookMessage
from .transport import TransportError, WebhookTransport

logger = logging.getLogger(__name__)


class ReportDispatcher:
    """
    Builds and sends report messages.

    Stateless apart from whether a transport was given: without one every
    submission is skipped, since reporting is optional.
    """

    TITLE = "Report received"
    FOOTER = "AssettoServer"

    def __init__(
        self,
        transport: Optional[WebhookTransport],
        artifacts: ArtifactStore,
        server_name: str,
        profile_url_template: str = DEFAULT_PROFILE_URL_TEMPLATE,
    ):
        """
        Initialize dispatcher.

        Args:
            transport: Webhook transport, or None to disable reporting
            artifacts: Where replay clips and metadata are stored
            server_name: Server name; normalized once and used as sender
            profile_url_template: Profile link with a ``{guid}`` placeholder
        """
        self.transport = transport
        self.artifacts = artifacts
        self.sender_name = normalize_display_name(server_name)
        self.profile_url_template = profile_url_template

    @property
    def enabled(self) -> bool:
        return self.transport is not None

    def build_message(self, client: Any, replay: Replay, reason: str) -> WebhookMessage:
        """Build the webhook message for a report."""
        embed = Embed(
            title=self.TITLE,
            description=escape_markup(reason),
            timestamp=replay.audit_log.timestamp,
            author=EmbedAuthor(
                name=escape_markup(client.name),
                url=self.profile_url_template.format(guid=client.guid),
            ),
            footer=EmbedFooter(text=self.FOOTER),
        )
        return WebhookMessage(username=self.sender_name, embeds=[embed])

    async def submit_report(self, client: Any, replay: Replay, reason: str) -> ReportOutcome:
        """
        Send a report with the replay's clip and metadata attached.

        Args:
            client: Reporting client (``name`` and ``guid``)
            replay: Replay backing the report
            reason: Free-text reason given by the client

        Returns:
            ReportOutcome; FAILED carries the delivery error
        """
        if self.transport is None:
            return ReportOutcome.skipped()

        if not self.artifacts.has_artifacts(replay.guid):
            logger.error(f"Report {replay.guid} has no clip or metadata on disk")
            return ReportOutcome.failed(f"Missing artifacts for replay {replay.guid}")

        try:
            message = self.build_message(client, replay, reason)
            await self.transport.send(message, self.artifacts.attachments(replay.guid))
        except TransportError as e:
            logger.error(f"Failed to deliver report {replay.guid}: {e}")
            return ReportOutcome.failed(str(e))
        except Exception as e:
            logger.exception(f"Unexpected error delivering report {replay.guid}")
            return ReportOutcome.failed(f"{type(e).__name__}: {e}")

        logger.info(f"Report {replay.guid} delivered")
        return ReportOutcome.sent()
