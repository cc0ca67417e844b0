"""Pytest configuration for replay-report tests.

Puts the project root on sys.path and provides an in-memory session
host so plugin tests can fire connect/disconnect/chat events directly.
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, List

import pytest

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from replay_report.audit.models import AuditClient, AuditLog, Replay  # noqa: E402

BASE_TIME = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: datetime = BASE_TIME):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


class FakeClient:
    """Session client double."""

    def __init__(self, name: str, guid):
        self.name = name
        self.guid = guid
        self._first_update_callbacks: List[Callable] = []

    def on_first_update(self, callback):
        self._first_update_callbacks.append(callback)

    def send_first_update(self):
        for callback in self._first_update_callbacks:
            callback(self)


class FakeHost:
    """Session host double with synchronous event delivery."""

    def __init__(self, public_ip: str = "203.0.113.7", http_port: int = 8081):
        self.public_ip = public_ip
        self.http_port = http_port
        self.extra_options = ""
        self.clients: List[FakeClient] = []
        self._connected: List[Callable] = []
        self._disconnected: List[Callable] = []
        self._chat: List[Callable] = []

    def on_client_connected(self, callback):
        self._connected.append(callback)

    def on_client_disconnected(self, callback):
        self._disconnected.append(callback)

    def on_chat_message(self, callback):
        self._chat.append(callback)

    def connected_clients(self):
        return list(self.clients)

    def append_extra_options(self, text: str):
        self.extra_options += text

    def connect(self, client: FakeClient, first_update: bool = True):
        self.clients.append(client)
        for callback in self._connected:
            callback(client)
        if first_update:
            client.send_first_update()

    def disconnect(self, client: FakeClient):
        self.clients.remove(client)
        for callback in self._disconnected:
            callback(client)

    def chat(self, client: FakeClient, message: str):
        for callback in self._chat:
            callback(client, message)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def make_client():
    """Factory for session client doubles."""
    return FakeClient


@pytest.fixture
def client():
    return FakeClient("Speedy_Driver", 76561198000000001)


@pytest.fixture
def audit_client():
    return AuditClient(name="Speedy_Driver", guid="76561198000000001")


@pytest.fixture
def replay():
    return Replay(audit_log=AuditLog(timestamp=BASE_TIME))
