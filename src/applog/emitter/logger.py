"""Emission entry point feeding the console, the file sink and the ring buffer."""

from __future__ import annotations

import logging
import threading
import traceback
from collections.abc import Mapping
from typing import Any

from applog.buffer.ring_buffer import RingBuffer
from applog.core.config import Settings
from applog.core.types import LogEntry, LogLevel
from applog.fmt.formatter import format_console
from applog.sink.file_sink import FileSink

logger = logging.getLogger(__name__)

CONSOLE_LOGGER_NAME = "applog.console"

_STDLIB_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARN: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


def _console_logger(enabled: bool) -> logging.Logger | None:
    if not enabled:
        return None
    console = logging.getLogger(CONSOLE_LOGGER_NAME)
    if not console.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        console.addHandler(handler)
        console.setLevel(logging.DEBUG)
        console.propagate = False
    return console


class AppLogger:
    """Process logger value, built once at startup and passed to collaborators.

    Emission never raises: console output is advisory, the file sink absorbs
    its own I/O failures and the ring buffer push cannot fail.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        buffer: RingBuffer | None = None,
        sink: FileSink | None = None,
        console: logging.Logger | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.buffer = buffer if buffer is not None else RingBuffer(max_size=self.settings.buffer_capacity)
        if sink is None:
            sink = FileSink(self.settings.log_path, max_bytes=self.settings.max_file_bytes)
        self.sink = sink
        self.console = console if console is not None else _console_logger(self.settings.console_enabled)
        self.color = self.settings.console_color

    def debug(self, message: str, context: Mapping[str, Any] | None = None) -> LogEntry:
        return self.emit(LogLevel.DEBUG, message, context)

    def info(self, message: str, context: Mapping[str, Any] | None = None) -> LogEntry:
        return self.emit(LogLevel.INFO, message, context)

    def warn(self, message: str, context: Mapping[str, Any] | None = None) -> LogEntry:
        return self.emit(LogLevel.WARN, message, context)

    def error_with_cause(
        self,
        message: str,
        cause: BaseException,
        context: Mapping[str, Any] | None = None,
    ) -> LogEntry:
        """Record an error together with the traceback of ``cause``."""
        return self.emit(LogLevel.ERROR, message, context, cause=cause)

    def error_with_context(self, message: str, context: Mapping[str, Any] | None = None) -> LogEntry:
        """Record an error described only by a context mapping (no stack)."""
        return self.emit(LogLevel.ERROR, message, context)

    def emit(
        self,
        level: LogLevel | str,
        message: str,
        context: Mapping[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> LogEntry:
        """Build an entry and push it to every destination; returns the entry."""
        entry = LogEntry(
            level=LogLevel.parse(level, LogLevel.INFO),
            message=message,
            context=context,
            stack=_stack_of(cause),
        )
        self._write_console(entry)
        self.sink.append(entry)
        self.buffer.push(entry)
        return entry

    def recent(self, level: LogLevel | None = None, limit: int | None = None) -> list[LogEntry]:
        return self.buffer.query(level, self.settings.default_limit if limit is None else limit)

    def clear(self) -> None:
        """Drop buffered entries and truncate the active log file."""
        self.buffer.clear()
        self.sink.clear()

    @property
    def sink_failures(self) -> int:
        return self.sink.failures

    def _write_console(self, entry: LogEntry) -> None:
        if self.console is None:
            return
        try:
            self.console.log(_STDLIB_LEVELS[entry.level], "%s", format_console(entry, color=self.color))
        except Exception:
            logger.debug("console_write_failed level=%s", entry.level.value)


def _stack_of(cause: BaseException | None) -> str | None:
    if cause is None:
        return None
    try:
        return "".join(traceback.format_exception(cause)).rstrip("\n")
    except Exception:
        return f"{type(cause).__name__}: {cause}"


_default: AppLogger | None = None
_default_lock = threading.Lock()


def default_logger(settings: Settings | None = None) -> AppLogger:
    """Return the process-wide logger, creating it on first call.

    The instance lives until the process exits; there is no teardown.
    ``settings`` only matters for the call that creates it.
    """
    global _default
    with _default_lock:
        if _default is None:
            _default = AppLogger(settings)
        return _default


def reset_default_logger() -> None:
    """Forget the process-wide logger (tests only)."""
    global _default
    with _default_lock:
        _default = None
