"""Session host integration for the report plugin."""

from .host import SessionClient, SessionHost
from .plugin import EXTRA_OPTIONS_TEMPLATE, ReportPlugin, client_id

__all__ = [
    "EXTRA_OPTIONS_TEMPLATE",
    "ReportPlugin",
    "SessionClient",
    "SessionHost",
    "client_id",
]
