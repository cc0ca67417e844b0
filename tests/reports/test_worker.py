"""
Tests for ReportWorker.

Tests:
- Submissions run on the background loop and resolve to outcomes
- The caller is not blocked while delivery is in progress
- Shutdown rejects new reports and lets in-flight ones finish
"""

import asyncio
import threading
from unittest.mock import AsyncMock, MagicMock

import pytest

from replay_report.reports.models import ReportOutcome, ReportStatus
from replay_report.reports.worker import ReportWorker, WorkerClosedError


@pytest.fixture
def dispatcher():
    mock = MagicMock()
    mock.submit_report = AsyncMock(return_value=ReportOutcome.sent())
    return mock


@pytest.fixture
def worker(dispatcher):
    worker = ReportWorker(dispatcher)
    yield worker
    worker.shutdown(wait=False, timeout=5)


class TestSubmit:
    """Tests for submit()."""

    def test_submit_resolves_outcome(self, worker, dispatcher, client, replay):
        future = worker.submit(client, replay, "reason")

        assert future.result(timeout=5).status == ReportStatus.SENT
        dispatcher.submit_report.assert_awaited_once_with(client, replay, "reason")

    def test_submit_starts_worker_lazily(self, worker, client, replay):
        assert worker.running is False

        worker.submit(client, replay, "reason").result(timeout=5)

        assert worker.running is True

    def test_start_twice_is_noop(self, worker):
        worker.start()
        worker.start()

        assert worker.running is True

    def test_failure_outcome_is_returned(self, worker, dispatcher, client, replay):
        dispatcher.submit_report.return_value = ReportOutcome.failed("Webhook returned 500")

        outcome = worker.submit(client, replay, "reason").result(timeout=5)

        assert outcome.success is False
        assert outcome.error == "Webhook returned 500"

    def test_submit_does_not_block(self, worker, dispatcher, client, replay):
        """Test the caller returns while delivery is still in progress."""
        release = threading.Event()

        async def slow_send(*args):
            while not release.is_set():
                await asyncio.sleep(0.01)
            return ReportOutcome.sent()

        dispatcher.submit_report = slow_send

        future = worker.submit(client, replay, "reason")

        assert future.done() is False
        assert worker.pending_count == 1
        release.set()
        assert future.result(timeout=5).success is True


class TestShutdown:
    """Tests for shutdown()."""

    def test_rejects_new_reports(self, dispatcher, client, replay):
        worker = ReportWorker(dispatcher)
        worker.start()
        worker.shutdown()

        with pytest.raises(WorkerClosedError):
            worker.submit(client, replay, "reason")

        with pytest.raises(WorkerClosedError):
            worker.start()

        assert worker.running is False

    def test_in_flight_reports_complete(self, dispatcher, client, replay):
        """Test shutdown waits for reports already being delivered."""
        started = threading.Event()

        async def slow_send(*args):
            started.set()
            await asyncio.sleep(0.2)
            return ReportOutcome.sent()

        dispatcher.submit_report = slow_send
        worker = ReportWorker(dispatcher)
        future = worker.submit(client, replay, "reason")
        started.wait(timeout=5)

        worker.shutdown(wait=True, timeout=5)

        assert future.result(timeout=0).status == ReportStatus.SENT

    def test_shutdown_twice_is_noop(self, dispatcher):
        worker = ReportWorker(dispatcher)
        worker.shutdown()
        worker.shutdown()

    def test_shutdown_without_start(self, dispatcher, client, replay):
        worker = ReportWorker(dispatcher)
        worker.shutdown()

        with pytest.raises(WorkerClosedError):
            worker.submit(client, replay, "reason")
