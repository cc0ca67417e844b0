#!/usr/bin/env python3
"""
Report Plugin

Wires the audit trail and report delivery into a session host:
- records connect (at first data frame), disconnect and chat events
- forgets a client's replay when the client disconnects
- advertises the clip upload endpoint to clients at startup
- exposes the replay / audit log / report operations used by the
  report command and the clip upload path
"""

import concurrent.futures
import logging
from datetime import datetime
from typing import Any, Callable, Optional
from uuid import UUID, uuid4

from ..audit.assembler import AuditLogAssembler
from ..audit.ledger import EventLedger
from ..audit.models import (
    AuditClient,
    AuditLog,
    ChatMessageEvent,
    PlayerConnectedEvent,
    PlayerDisconnectedEvent,
    Replay,
    utc_now,
)
from ..audit.replays import ReplayTable
from ..core.config import ReportConfig
from ..reports.artifacts import ArtifactStore
from ..reports.dispatcher import ReportDispatcher
from ..reports.models import ReportOutcome
from ..reports.transport import WebhookTransport, create_transport
from ..reports.worker import ReportWorker, WorkerClosedError
from .host import SessionClient, SessionHost

logger = logging.getLogger(__name__)

EXTRA_OPTIONS_TEMPLATE = (
    "\n[REPLAY_CLIPS]\n"
    "UPLOAD_URL = 'http://{ip}:{port}/report?key={key}'\n"
    "DURATION = {duration}"
)


def client_id(client: Any) -> str:
    """Stable key for a client: its account id."""
    return str(client.guid)


class ReportPlugin:
    """
    Report plugin for a session host.

    Usage:
        plugin = ReportPlugin(ReportConfig.from_env(), host)
        plugin.start()

        # report command
        future = plugin.report(client, "rammed me at turn 1")

        plugin.stop()
    """

    def __init__(
        self,
        config: ReportConfig,
        host: SessionHost,
        transport: Optional[WebhookTransport] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize plugin and subscribe to host events.

        Args:
            config: Validated report settings
            host: Session host to subscribe to
            transport: Webhook transport; built from config.webhook_url if None
            clock: Time source for event timestamps
        """
        config.validate()
        self.config = config
        self.host = host
        self._clock = clock

        # Process-lifetime key embedded in the upload URL
        self.key: UUID = uuid4()

        self.artifacts = ArtifactStore(config.reports_dir)
        self.artifacts.ensure()

        if transport is None:
            transport = create_transport(config.webhook_url, config.webhook_timeout_seconds)

        self.ledger = EventLedger(config.retention, clock=clock)
        self.replays = ReplayTable()
        self.assembler = AuditLogAssembler(self.ledger, host.connected_clients, clock=clock)
        self.dispatcher = ReportDispatcher(
            transport,
            self.artifacts,
            server_name=config.server_name,
            profile_url_template=config.profile_url_template,
        )
        self.worker = ReportWorker(self.dispatcher)
        self._options_injected = False

        host.on_client_connected(self._on_client_connected)
        host.on_client_disconnected(self._on_client_disconnected)
        host.on_chat_message(self._on_chat_message)

    def start(self) -> None:
        """
        Advertise the upload endpoint and start report delivery.

        Runs after construction because the host only knows its public IP
        once startup has progressed far enough.
        """
        if not self._options_injected:
            self.host.append_extra_options(self.extra_options())
            self._options_injected = True
        self.worker.start()
        logger.info(
            f"Report plugin started (webhook {'enabled' if self.config.webhook_enabled else 'disabled'})"
        )

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop accepting reports and let in-flight ones finish."""
        self.worker.shutdown(wait=True, timeout=timeout)

    def extra_options(self) -> str:
        """Client options section with the upload URL and clip duration."""
        return EXTRA_OPTIONS_TEMPLATE.format(
            ip=self.host.public_ip,
            port=self.host.http_port,
            key=self.key,
            duration=self.config.clip_duration_seconds,
        )

    # Host callbacks

    def _on_client_connected(self, client: SessionClient) -> None:
        # Only clients that received their first update are audited
        client.on_first_update(self._on_client_first_update)

    def _on_client_first_update(self, client: SessionClient) -> None:
        self.ledger.record_safely(
            lambda: PlayerConnectedEvent(client=AuditClient.from_session(client), timestamp=self._clock())
        )

    def _on_client_disconnected(self, client: SessionClient) -> None:
        self.ledger.record_safely(
            lambda: PlayerDisconnectedEvent(client=AuditClient.from_session(client), timestamp=self._clock())
        )

        guid = getattr(client, "guid", None)
        if guid is not None:
            self.replays.remove(str(guid))

    def _on_chat_message(self, client: SessionClient, message: str) -> None:
        self.ledger.record_safely(
            lambda: ChatMessageEvent(
                client=AuditClient.from_session(client),
                message=message or "",
                timestamp=self._clock(),
            )
        )

    # Operations for the report command / clip upload path

    def get_last_replay(self, client_key: str) -> Optional[Replay]:
        return self.replays.get_latest(client_key)

    def set_last_replay(self, client_key: str, replay: Replay) -> None:
        self.replays.set_latest(client_key, replay)

    def get_audit_log(self, now: Optional[datetime] = None) -> AuditLog:
        return self.assembler.build_audit_log(now)

    def register_replay(self, client: Any, now: Optional[datetime] = None) -> Replay:
        """
        Register a freshly uploaded clip as the client's latest replay.

        Takes the audit log for ``now``, writes it as the replay's metadata
        file and makes the replay the one used by the client's next report.
        The clip itself is stored at ``artifacts.clip_path(replay.guid)`` by
        the upload handler.
        """
        replay = Replay(audit_log=self.get_audit_log(now))
        self.artifacts.write_metadata(replay)
        self.set_last_replay(client_id(client), replay)
        return replay

    def get_stats(self) -> dict:
        """Get plugin statistics."""
        return {
            "webhook_enabled": self.config.webhook_enabled,
            "worker_running": self.worker.running,
            "pending_reports": self.worker.pending_count,
            "replays": len(self.replays),
            "ledger": self.ledger.get_stats(),
        }

    def submit_report(
        self, client: Any, replay: Replay, reason: str
    ) -> "concurrent.futures.Future[ReportOutcome]":
        """
        Queue a report for delivery; never blocks the calling thread.

        After ``stop`` the returned future is already resolved as failed.
        """
        try:
            return self.worker.submit(client, replay, reason)
        except WorkerClosedError as e:
            logger.warning(f"Report for replay {replay.guid} rejected: {e}")
            future: concurrent.futures.Future = concurrent.futures.Future()
            future.set_result(ReportOutcome.failed(str(e)))
            return future

    def report(self, client: Any, reason: str) -> Optional["concurrent.futures.Future[ReportOutcome]"]:
        """
        Report using the client's latest replay.

        Returns:
            The delivery future, or None if the client has no replay yet
        """
        replay = self.get_last_replay(client_id(client))
        if replay is None:
            logger.info(f"No replay available for report by {client_id(client)}")
            return None
        return self.submit_report(client, replay, reason)
