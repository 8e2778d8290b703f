"""Read side of the logger: filtered views and their two export shapes."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from applog.core.types import LogEntry, LogLevel, utc_now_iso
from applog.emitter.logger import AppLogger
from applog.fmt.formatter import format_digest


class LogRetrieval:
    """Level-filtered, limit-bounded reads over an ``AppLogger``'s buffer."""

    def __init__(self, app_logger: AppLogger) -> None:
        self.app_logger = app_logger

    def recent(self, level: LogLevel | None = None, limit: int | None = None) -> list[LogEntry]:
        """Most-recent-first entries with priority >= ``level``."""
        return self.app_logger.recent(level, limit)

    @staticmethod
    def as_payload(entries: Sequence[LogEntry], now: str | None = None) -> dict[str, Any]:
        """JSON body ``{logs, count, timestamp}``."""
        return {
            "logs": [entry.to_dict() for entry in entries],
            "count": len(entries),
            "timestamp": now or utc_now_iso(),
        }

    @staticmethod
    def as_digest(entries: Sequence[LogEntry], now: str | None = None) -> str:
        return format_digest(entries, now=now)

    def stats(self) -> dict[str, Any]:
        """Operator view of buffer fill and silent sink degradation."""
        sink = self.app_logger.sink
        return {
            "buffered": len(self.app_logger.buffer),
            "capacity": self.app_logger.buffer.capacity,
            "sink_failures": sink.failures,
            "rotations": sink.rotations,
            "log_file": str(sink.path),
        }
