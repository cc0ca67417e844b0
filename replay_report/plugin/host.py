"""
Session host interfaces.

The plugin does not own the game server; it subscribes to these
notifications and queries. Any host exposing this surface can run it.
"""

from typing import Any, Callable, Iterable, Protocol


class SessionClient(Protocol):
    """A connected participant as seen by the host."""

    @property
    def name(self) -> str: ...

    @property
    def guid(self) -> Any: ...

    def on_first_update(self, callback: Callable[["SessionClient"], None]) -> None:
        """Call ``callback`` once the first data frame has been sent to the client."""
        ...


ClientCallback = Callable[[SessionClient], None]
ChatCallback = Callable[[SessionClient, str], None]


class SessionHost(Protocol):
    """Event sources and queries the plugin needs from the server."""

    public_ip: str
    http_port: int

    def on_client_connected(self, callback: ClientCallback) -> None: ...

    def on_client_disconnected(self, callback: ClientCallback) -> None: ...

    def on_chat_message(self, callback: ChatCallback) -> None: ...

    def connected_clients(self) -> Iterable[SessionClient]:
        """Current roster."""
        ...

    def append_extra_options(self, text: str) -> None:
        """Append text to the options blob sent to every client."""
        ...
