"""
Audit Models

Immutable records of what happened on the server:
- AuditClient: snapshot of a player's public identity
- Audit events: player connected, player disconnected, chat message
- AuditLog: exported roster + events at a point in time
- Replay: handle to a captured clip and the audit log taken with it
"""

from datetime import datetime, timezone
from typing import Annotated, Any, Literal, Tuple, Union
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utc_now() -> datetime:
    """Current wall-clock time, timezone-aware."""
    return datetime.now(timezone.utc)


def as_utc(value):
    """Coerce a datetime to aware UTC; naive values are taken as UTC."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return value


class AuditClient(BaseModel):
    """
    Public identity of a player at the moment an event was created.

    This is a copy, not a reference to the live session, so it stays
    valid after the player disconnects.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Display name")
    guid: str = Field(..., description="Unique account identifier")

    @classmethod
    def from_session(cls, client: Any) -> "AuditClient":
        """Snapshot a live session client.

        Raises:
            ValueError: if the client state has already been torn down
        """
        guid = getattr(client, "guid", None)
        if guid is None:
            raise ValueError("Session client has no account identifier")
        name = getattr(client, "name", None)
        return cls(name=name or "", guid=str(guid))


class AuditEvent(BaseModel):
    """Fields shared by the event variants. Only the variants are recorded."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=utc_now)
    client: AuditClient

    @field_validator("timestamp", mode="before")
    @classmethod
    def ensure_utc(cls, v):
        return as_utc(v)

    def age(self, now: datetime) -> float:
        """Seconds elapsed between this event and ``now``."""
        return (now - self.timestamp).total_seconds()


class PlayerConnectedEvent(AuditEvent):
    type: Literal["player_connected"] = "player_connected"


class PlayerDisconnectedEvent(AuditEvent):
    type: Literal["player_disconnected"] = "player_disconnected"


class ChatMessageEvent(AuditEvent):
    type: Literal["chat_message"] = "chat_message"
    message: str = ""


AUDIT_EVENT_TYPES = (PlayerConnectedEvent, PlayerDisconnectedEvent, ChatMessageEvent)

AnyAuditEvent = Annotated[
    Union[PlayerConnectedEvent, PlayerDisconnectedEvent, ChatMessageEvent],
    Field(discriminator="type"),
]


class AuditLog(BaseModel):
    """
    Exported audit trail.

    ``clients`` and ``events`` are captured one after the other, so a
    player may appear in one but not yet (or no longer) in the other.
    """

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    clients: Tuple[AuditClient, ...] = ()
    events: Tuple[AnyAuditEvent, ...] = ()

    @field_validator("timestamp", mode="before")
    @classmethod
    def ensure_utc(cls, v):
        return as_utc(v)

    def to_json(self) -> str:
        """Serialized form stored as replay metadata."""
        return self.model_dump_json(indent=2)


class Replay(BaseModel):
    """A captured clip plus the audit log taken when it was registered."""

    model_config = ConfigDict(frozen=True)

    guid: UUID = Field(default_factory=uuid4)
    audit_log: AuditLog
