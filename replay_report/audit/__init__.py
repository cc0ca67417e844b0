"""
Session audit trail.

- Sanitizer: escaping of user-controlled text sent outward
- EventLedger: concurrent, time-windowed store of audit events
- ReplayTable: latest replay registered per client
- AuditLogAssembler: roster + ledger snapshot as an AuditLog
"""

from .assembler import AuditLogAssembler
from .ledger import EventLedger
from .models import (
    AnyAuditEvent,
    AuditClient,
    AuditLog,
    ChatMessageEvent,
    PlayerConnectedEvent,
    PlayerDisconnectedEvent,
    Replay,
    utc_now,
)
from .replays import ReplayTable
from .sanitizer import escape_markup, normalize_display_name

__all__ = [
    "AnyAuditEvent",
    "AuditClient",
    "AuditLog",
    "AuditLogAssembler",
    "ChatMessageEvent",
    "EventLedger",
    "PlayerConnectedEvent",
    "PlayerDisconnectedEvent",
    "Replay",
    "ReplayTable",
    "escape_markup",
    "normalize_display_name",
    "utc_now",
]
