"""
Event Ledger

In-memory, time-windowed audit trail. Session callbacks append events
from many threads; the export path takes snapshots while they do.

Eviction is lazy and front-only: every write and read drops events from
the head of the queue while they are older than the retention window.
This assumes insertion order roughly follows timestamp order, which holds
because events are timestamped when created and appended right after. An
event appended late can delay the eviction of stale events behind it but
can never cause a fresh event to be removed.
"""

import threading
from collections import deque
from datetime import datetime, timedelta
from typing import Callable, Deque, List, Optional

from loguru import logger

from .models import AUDIT_EVENT_TYPES, AnyAuditEvent, as_utc, utc_now


class EventLedger:
    """
    Append-only sliding window over audit events.

    Usage:
        ledger = EventLedger(retention=timedelta(seconds=30))
        ledger.record(PlayerConnectedEvent(client=client))

        events = ledger.snapshot()

    The lock only guards the deque operations themselves (append, the
    front eviction loop and the copy), all O(1) amortized.
    """

    def __init__(
        self,
        retention: timedelta,
        clock: Callable[[], datetime] = utc_now,
    ):
        if retention.total_seconds() <= 0:
            raise ValueError("Retention window must be positive")

        self._retention = retention
        self._clock = clock
        self._events: Deque[AnyAuditEvent] = deque()
        self._lock = threading.Lock()

        # Stats
        self._recorded = 0
        self._evicted = 0
        self._dropped = 0

    @property
    def retention(self) -> timedelta:
        return self._retention

    def __len__(self) -> int:
        return len(self._events)

    @staticmethod
    def _check_event(event) -> None:
        if not isinstance(event, AUDIT_EVENT_TYPES):
            raise TypeError(f"Not an audit event variant: {type(event).__name__}")

    def record(self, event: AnyAuditEvent) -> None:
        """
        Append an event to the tail, then evict expired events.

        Raises:
            TypeError: if ``event`` is not one of the event variants
        """
        self._check_event(event)
        with self._lock:
            self._events.append(event)
            self._recorded += 1
        self.evict()

    def record_safely(self, factory: Callable[[], AnyAuditEvent]) -> bool:
        """
        Build an event and record it, dropping it if building fails.

        Session callbacks use this so a client that is already torn down
        cannot break the host's event handling.

        Returns:
            True if the event was recorded
        """
        try:
            event = factory()
            self._check_event(event)
        except Exception:
            with self._lock:
                self._dropped += 1
            logger.exception("Error building audit event, event dropped")
            return False

        self.record(event)
        return True

    def evict(
        self,
        now: Optional[datetime] = None,
        retention: Optional[timedelta] = None,
    ) -> int:
        """
        Drop events from the head while they are older than the window.

        Args:
            now: Reference time (defaults to the ledger clock); naive
                values are taken as UTC
            retention: Window override (defaults to the configured one)

        Returns:
            Number of events removed
        """
        now = self._clock() if now is None else as_utc(now)
        if retention is None:
            retention = self._retention
        cutoff = now - retention
        removed = 0

        with self._lock:
            while self._events and self._events[0].timestamp < cutoff:
                self._events.popleft()
                removed += 1
            self._evicted += removed

        if removed:
            logger.debug("Evicted expired audit events", count=removed)
        return removed

    def snapshot(self, now: Optional[datetime] = None) -> List[AnyAuditEvent]:
        """Evict, then return the retained events in insertion order."""
        self.evict(now)
        with self._lock:
            return list(self._events)

    def get_stats(self) -> dict:
        """Get ledger statistics."""
        return {
            "retention_seconds": self._retention.total_seconds(),
            "retained": len(self._events),
            "recorded": self._recorded,
            "evicted": self._evicted,
            "dropped": self._dropped,
        }
