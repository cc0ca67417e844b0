#!/usr/bin/env python3
"""
Report Worker

Runs report deliveries on a background asyncio loop so the session
host's event threads never wait on network I/O. Callers get a
``concurrent.futures.Future`` they can inspect or ignore.
"""

import asyncio
import concurrent.futures
import logging
import threading
from typing import Any, Optional, Set

from ..audit.models import Replay
from .dispatcher import ReportDispatcher
from .models import ReportOutcome

logger = logging.getLogger(__name__)


class WorkerClosedError(RuntimeError):
    """The worker is shutting down and accepts no new reports."""


class ReportWorker:
    """
    Background loop for report delivery.

    Usage:
        worker = ReportWorker(dispatcher)
        worker.start()
        future = worker.submit(client, replay, "cutting the chicane")
        ...
        worker.shutdown()

    Shutdown stops new submissions immediately; reports already in flight
    are allowed to finish (or fail) before the loop stops.
    """

    def __init__(self, dispatcher: ReportDispatcher, name: str = "report-worker"):
        self._dispatcher = dispatcher
        self._name = name
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()
        self._closed = False
        self._pending: Set[concurrent.futures.Future] = set()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._closed

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def start(self) -> None:
        """Start the background loop. Starting twice is a no-op."""
        with self._lock:
            self._start_locked()

    def _start_locked(self) -> None:
        if self._closed:
            raise WorkerClosedError("Report worker has been shut down")
        if self._thread is not None:
            return

        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run_loop, name=self._name, daemon=True)
        self._thread.start()
        logger.info("Report worker started")

    def _run_loop(self) -> None:
        asyncio.set_event_loop(self._loop)
        try:
            self._loop.run_forever()
        finally:
            self._loop.close()

    def _forget(self, future: concurrent.futures.Future) -> None:
        with self._lock:
            self._pending.discard(future)

        if not future.cancelled() and future.exception() is None:
            outcome = future.result()
            if not outcome.success:
                logger.warning(f"Report delivery failed: {outcome.error}")

    def submit(self, client: Any, replay: Replay, reason: str) -> "concurrent.futures.Future[ReportOutcome]":
        """
        Queue a report for delivery without blocking.

        Raises:
            WorkerClosedError: if shutdown has begun
        """
        with self._lock:
            self._start_locked()
            future = asyncio.run_coroutine_threadsafe(
                self._dispatcher.submit_report(client, replay, reason),
                self._loop,
            )
            self._pending.add(future)

        future.add_done_callback(self._forget)
        return future

    def shutdown(self, wait: bool = True, timeout: Optional[float] = None) -> None:
        """
        Stop accepting reports and stop the loop.

        Args:
            wait: Let in-flight reports finish first; otherwise cancel them
            timeout: Upper bound in seconds for waiting on in-flight reports
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            pending = list(self._pending)

        if pending:
            if wait:
                logger.info(f"Waiting for {len(pending)} in-flight report(s)")
                concurrent.futures.wait(pending, timeout=timeout)
            for future in pending:
                future.cancel()

        if self._loop is not None and self._thread is not None:
            self._loop.call_soon_threadsafe(self._loop.stop)
            self._thread.join(timeout)
        logger.info("Report worker stopped")
