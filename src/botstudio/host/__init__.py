"""Host-side state: bounded buffers, cached credential, bot lifecycle control."""

from botstudio.host.bot_host import BotHost
from botstudio.host.buffers import BotLogBuffer, HistoryEntry, HistoryStore, LogEntry
from botstudio.host.credentials import CredentialStore

__all__ = [
    "BotHost",
    "BotLogBuffer",
    "CredentialStore",
    "HistoryEntry",
    "HistoryStore",
    "LogEntry",
]
