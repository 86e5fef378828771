"""Fixed-capacity in-memory buffers for edit history and bot log lines."""

from __future__ import annotations

import threading
import time
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, TypeVar

from botstudio.bot.manager import LogSeverity

T = TypeVar("T")


class RingBuffer(Generic[T]):
    """Bounded queue that drops the oldest item on overflow."""

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self._items: deque[T] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._items.maxlen or 0

    def append(self, item: T) -> None:
        with self._lock:
            self._items.append(item)

    def snapshot(self) -> list[T]:
        """Return items oldest first."""
        with self._lock:
            return list(self._items)

    def __len__(self) -> int:
        return len(self._items)


@dataclass(frozen=True)
class HistoryEntry:
    """One successful edit kept for the studio history panel."""

    original_image: str
    edited_image: str
    prompt: str
    timestamp: int = field(default_factory=lambda: int(time.time() * 1000))
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


@dataclass(frozen=True)
class LogEntry:
    """One operator-facing bot log line."""

    message: str
    severity: LogSeverity
    time: str = field(default_factory=lambda: datetime.now().strftime("%H:%M:%S"))
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


class HistoryStore:
    """Most recent successful edits, newest first."""

    def __init__(self, limit: int = 10) -> None:
        self._buffer: RingBuffer[HistoryEntry] = RingBuffer(limit)

    def record(self, *, original_image: str, edited_image: str, prompt: str) -> HistoryEntry:
        entry = HistoryEntry(original_image=original_image, edited_image=edited_image, prompt=prompt)
        self._buffer.append(entry)
        return entry

    def entries(self) -> list[HistoryEntry]:
        return list(reversed(self._buffer.snapshot()))

    def __len__(self) -> int:
        return len(self._buffer)


class BotLogBuffer:
    """Most recent bot log lines, oldest first; usable as a ``BotManager`` ``on_log`` sink."""

    def __init__(self, limit: int = 50) -> None:
        self._buffer: RingBuffer[LogEntry] = RingBuffer(limit)

    def append(self, message: str, severity: LogSeverity) -> None:
        self._buffer.append(LogEntry(message=message, severity=LogSeverity(severity)))

    def entries(self) -> list[LogEntry]:
        return self._buffer.snapshot()

    def __len__(self) -> int:
        return len(self._buffer)
