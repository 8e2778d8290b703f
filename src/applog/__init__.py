"""Diagnostic logging subsystem: ring buffer, rotating file sink and exports."""

from applog.buffer.ring_buffer import RingBuffer
from applog.core.config import Settings
from applog.core.types import LogEntry, LogLevel
from applog.emitter.logger import AppLogger, default_logger
from applog.retrieval.query import LogRetrieval
from applog.sink.file_sink import FileSink

__all__ = [
    "AppLogger",
    "FileSink",
    "LogEntry",
    "LogLevel",
    "LogRetrieval",
    "RingBuffer",
    "Settings",
    "default_logger",
]
