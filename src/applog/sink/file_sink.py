"""Append-only log file with size-triggered rotation.

Every failure on this path is absorbed: the sink counts it, reports it at
DEBUG level and returns. Callers never see an exception from ``append`` or
``clear``.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from pathlib import Path

from applog.core.types import LogEntry
from applog.fmt.formatter import format_line

logger = logging.getLogger(__name__)

DEFAULT_MAX_BYTES = 5 * 1024 * 1024


class FileSink:
    """Best-effort writer for the active log file at ``path``.

    A single lock covers the size check, the rotation and the write so two
    threads can neither rotate twice for the same threshold crossing nor
    interleave bytes of their lines.
    """

    def __init__(self, path: str | Path, max_bytes: int = DEFAULT_MAX_BYTES) -> None:
        self.path = Path(path)
        self.max_bytes = max_bytes
        self._lock = threading.Lock()
        self._failures = 0
        self._rotations = 0

    @property
    def failures(self) -> int:
        """Number of absorbed I/O failures since construction."""
        with self._lock:
            return self._failures

    @property
    def rotations(self) -> int:
        with self._lock:
            return self._rotations

    def append(self, entry: LogEntry) -> bool:
        """Write one formatted entry; returns ``False`` when the write was dropped."""
        try:
            data = (format_line(entry) + "\n").encode("utf-8", errors="backslashreplace")
        except Exception as exc:
            with self._lock:
                self._failures += 1
            logger.debug("sink_render_failed path=%s error=%s", self.path, exc)
            return False
        with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self._rotate_if_needed(len(data))
                with self.path.open("ab") as handle:
                    handle.write(data)
            except OSError as exc:
                self._failures += 1
                logger.debug("sink_write_failed path=%s error=%s", self.path, exc)
                return False
        return True

    def clear(self) -> None:
        """Truncate the active file; rotated files are left alone."""
        with self._lock:
            try:
                if self.path.exists():
                    self.path.write_bytes(b"")
            except OSError as exc:
                self._failures += 1
                logger.debug("sink_clear_failed path=%s error=%s", self.path, exc)

    def rotated_files(self) -> list[Path]:
        """Rotated siblings of the active file, oldest first."""
        pattern = f"{self.path.stem}.*{self.path.suffix}"
        try:
            candidates = [p for p in self.path.parent.glob(pattern) if p != self.path]
        except OSError:
            return []
        return sorted(candidates, key=self._rotation_order)

    def _rotate_if_needed(self, incoming: int) -> None:
        try:
            size = self.path.stat().st_size
        except FileNotFoundError:
            return
        if size == 0 or size + incoming <= self.max_bytes:
            return
        target = self._rotation_target()
        os.rename(self.path, target)
        self._rotations += 1
        logger.debug("sink_rotated path=%s target=%s size=%s", self.path, target, size)

    def _rotation_target(self) -> Path:
        stamp = int(time.time() * 1000)
        target = self.path.with_name(f"{self.path.stem}.{stamp}{self.path.suffix}")
        counter = 1
        while target.exists():
            target = self.path.with_name(f"{self.path.stem}.{stamp}-{counter}{self.path.suffix}")
            counter += 1
        return target

    def _rotation_order(self, path: Path) -> tuple[int, int]:
        middle = path.name[len(self.path.stem) + 1 : len(path.name) - len(self.path.suffix)]
        stamp, _, counter = middle.partition("-")
        try:
            return int(stamp), int(counter or 0)
        except ValueError:
            return 0, 0

