"""
Audit Log Assembler

Combines the host's current roster with a ledger snapshot into an
AuditLog that can travel with a replay.
"""

from datetime import datetime
from typing import Any, Callable, Iterable, List, Optional

from loguru import logger

from .ledger import EventLedger
from .models import AuditClient, AuditLog, as_utc, utc_now


class AuditLogAssembler:
    """
    Builds exportable audit logs.

    The roster and the event snapshot are read one after the other, so a
    client connecting or leaving in between can show up in only one of
    them. Consumers are expected to tolerate that.
    """

    def __init__(
        self,
        ledger: EventLedger,
        roster_provider: Callable[[], Iterable[Any]],
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize assembler.

        Args:
            ledger: Event ledger to snapshot
            roster_provider: Returns the clients currently on the server
            clock: Time source used when no timestamp is given
        """
        self._ledger = ledger
        self._roster_provider = roster_provider
        self._clock = clock

    def _snapshot_roster(self) -> List[AuditClient]:
        clients = []
        for client in self._roster_provider():
            try:
                clients.append(AuditClient.from_session(client))
            except Exception as e:
                # Client left while the roster was being read
                logger.warning(f"Skipping roster entry: {e}")
        return clients

    def build_audit_log(self, now: Optional[datetime] = None) -> AuditLog:
        """
        Export the audit trail as of ``now``.

        Args:
            now: Export time; also the eviction reference time. Naive
                values are taken as UTC

        Returns:
            AuditLog with roster and retained events
        """
        now = self._clock() if now is None else as_utc(now)
        self._ledger.evict(now)
        clients = self._snapshot_roster()
        events = self._ledger.snapshot(now)

        return AuditLog(timestamp=now, clients=tuple(clients), events=tuple(events))
