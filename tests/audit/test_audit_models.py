"""
Tests for audit models.

Tests:
- AuditClient snapshots from session objects
- Event immutability and UTC timestamps
- AuditLog JSON round trip keeps event variants
"""

from datetime import datetime, timezone
from types import SimpleNamespace
from uuid import UUID

import pytest
from pydantic import ValidationError

from replay_report.audit.models import (
    AuditClient,
    AuditLog,
    ChatMessageEvent,
    PlayerConnectedEvent,
    PlayerDisconnectedEvent,
    Replay,
)


class TestAuditClient:
    """Tests for AuditClient."""

    def test_from_session(self, client):
        """Test snapshot copies name and stringified guid."""
        snapshot = AuditClient.from_session(client)

        assert snapshot.name == "Speedy_Driver"
        assert snapshot.guid == "76561198000000001"

    def test_snapshot_survives_session_changes(self, client):
        """Test later changes to the session do not affect the snapshot."""
        snapshot = AuditClient.from_session(client)
        client.name = "Renamed"
        client.guid = None

        assert snapshot.name == "Speedy_Driver"

    def test_torn_down_session_raises(self):
        """Test a session without guid cannot be snapshotted."""
        with pytest.raises(ValueError):
            AuditClient.from_session(SimpleNamespace(name="ghost", guid=None))

        with pytest.raises(ValueError):
            AuditClient.from_session(object())

    def test_is_immutable(self, audit_client):
        with pytest.raises(ValidationError):
            audit_client.name = "other"


class TestAuditEvents:
    """Tests for audit event variants."""

    def test_timestamp_defaults_to_utc_now(self, audit_client):
        before = datetime.now(timezone.utc)
        event = PlayerConnectedEvent(client=audit_client)

        assert event.timestamp.tzinfo is not None
        assert event.timestamp >= before

    def test_naive_timestamp_is_utc(self, audit_client):
        event = PlayerConnectedEvent(client=audit_client, timestamp=datetime(2024, 1, 1, 10, 0))

        assert event.timestamp == datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)

    def test_event_types(self, audit_client):
        assert PlayerConnectedEvent(client=audit_client).type == "player_connected"
        assert PlayerDisconnectedEvent(client=audit_client).type == "player_disconnected"
        assert ChatMessageEvent(client=audit_client, message="hi").type == "chat_message"

    def test_events_are_immutable(self, audit_client):
        event = ChatMessageEvent(client=audit_client, message="hi")

        with pytest.raises(ValidationError):
            event.message = "edited"

    def test_age(self, audit_client):
        created = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)
        event = PlayerConnectedEvent(client=audit_client, timestamp=created)

        assert event.age(datetime(2024, 1, 1, 10, 0, 12, tzinfo=timezone.utc)) == 12.0


class TestAuditLog:
    """Tests for AuditLog and Replay."""

    def test_json_round_trip_keeps_variants(self, audit_client):
        """Test serialized events come back as the same variants."""
        stamp = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)
        log = AuditLog(
            timestamp=stamp,
            clients=(audit_client,),
            events=(
                PlayerConnectedEvent(client=audit_client, timestamp=stamp),
                ChatMessageEvent(client=audit_client, message="sorry!", timestamp=stamp),
                PlayerDisconnectedEvent(client=audit_client, timestamp=stamp),
            ),
        )

        restored = AuditLog.model_validate_json(log.to_json())

        assert restored == log
        assert [type(event) for event in restored.events] == [
            PlayerConnectedEvent,
            ChatMessageEvent,
            PlayerDisconnectedEvent,
        ]

    def test_replay_gets_unique_guid(self):
        log = AuditLog(timestamp=datetime.now(timezone.utc))

        first = Replay(audit_log=log)
        second = Replay(audit_log=log)

        assert isinstance(first.guid, UUID)
        assert first.guid != second.guid
