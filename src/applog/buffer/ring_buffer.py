from __future__ import annotations

import threading
from collections import deque

from applog.core.types import LogEntry, LogLevel


class RingBuffer:
    """Bounded FIFO of log entries; the oldest entry is evicted on overflow."""

    def __init__(self, max_size: int = 500) -> None:
        if max_size < 1:
            raise ValueError("max_size must be positive")
        self._items: deque[LogEntry] = deque(maxlen=max_size)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._items.maxlen or 0

    def push(self, entry: LogEntry) -> None:
        with self._lock:
            self._items.append(entry)

    def query(self, level: LogLevel | None = None, limit: int = 100) -> list[LogEntry]:
        """Return entries at or above ``level``, most recent first, at most ``limit``."""
        if limit <= 0:
            return []
        with self._lock:
            snapshot = list(self._items)
        result: list[LogEntry] = []
        for entry in reversed(snapshot):
            if level is not None and entry.level.priority < level.priority:
                continue
            result.append(entry)
            if len(result) >= limit:
                break
        return result

    def items(self) -> list[LogEntry]:
        with self._lock:
            return list(self._items)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
