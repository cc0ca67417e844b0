"""Latest replay per connected client."""

import threading
from typing import Dict, Optional

from loguru import logger

from .models import Replay


class ReplayTable:
    """
    Maps a client's account id to the replay it registered most recently.

    Keys are stable account ids rather than session objects, so an entry
    never outlives the client by accident: the plugin removes it when the
    client disconnects. Registering a new replay replaces the previous one.
    Entries are not removed when a report is sent; the same replay can back
    several reports.
    """

    def __init__(self):
        self._replays: Dict[str, Replay] = {}
        self._lock = threading.Lock()

    def set_latest(self, client_id: str, replay: Replay) -> None:
        with self._lock:
            self._replays[client_id] = replay
        logger.debug("Registered replay", client_id=client_id, replay=str(replay.guid))

    def get_latest(self, client_id: str) -> Optional[Replay]:
        with self._lock:
            return self._replays.get(client_id)

    def remove(self, client_id: str) -> Optional[Replay]:
        """Forget the client's replay. Returns it, or None if there was none."""
        with self._lock:
            return self._replays.pop(client_id, None)

    def __contains__(self, client_id: str) -> bool:
        with self._lock:
            return client_id in self._replays

    def __len__(self) -> int:
        with self._lock:
            return len(self._replays)
