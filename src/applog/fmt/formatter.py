"""Plain-line, console and markdown digest renderers for log entries."""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from applog.core.types import LogEntry, LogLevel, utc_now_iso

_COLORS = {
    LogLevel.DEBUG: "\x1b[36m",
    LogLevel.INFO: "\x1b[32m",
    LogLevel.WARN: "\x1b[33m",
    LogLevel.ERROR: "\x1b[31m",
}
_RESET = "\x1b[0m"

DIGEST_SEPARATOR = "\n---\n\n"


def to_json(value: Any, *, indent: int | None = None) -> str:
    """Serialize context values without ever raising."""
    separators = None if indent is not None else (",", ":")
    try:
        return json.dumps(value, ensure_ascii=False, default=str, indent=indent, separators=separators)
    except Exception:
        # circular references, failing __str__, recursion depth
        return _safe_repr(value)


def _safe_repr(value: Any) -> str:
    try:
        return repr(value)
    except Exception:
        return f"<unrenderable {type(value).__name__}>"


def format_line(entry: LogEntry) -> str:
    """Render ``[<timestamp>] [<LEVEL>] <message>`` plus context and stack."""
    line = f"[{entry.timestamp}] [{entry.level.value.upper()}] {entry.message}"
    if entry.context is not None:
        line += f" | {to_json(entry.context)}"
    if entry.stack:
        line += f"\n{entry.stack}"
    return line


def format_console(entry: LogEntry, *, color: bool = True) -> str:
    label = f"[{entry.level.value.upper()}]"
    if color:
        label = f"{_COLORS[entry.level]}{label}{_RESET}"
    text = f"{label} {entry.message}"
    if entry.context is not None:
        text += f" {to_json(entry.context)}"
    if entry.stack:
        text += f"\n{entry.stack}"
    return text


def format_digest(entries: Iterable[LogEntry], now: str | None = None) -> str:
    """Render entries as a markdown digest for external debugging tools.

    Entries are emitted in the order given; an empty sequence produces the
    header alone.
    """
    header = f"# Application Logs ({now or utc_now_iso()})\n\n"
    sections = []
    for entry in entries:
        text = f"## [{entry.level.value.upper()}] {entry.timestamp}\n"
        text += f"**Message:** {entry.message}\n"
        if entry.context is not None:
            text += f"**Context:**\n```json\n{to_json(entry.context, indent=2)}\n```\n"
        if entry.stack:
            text += f"**Stack Trace:**\n```\n{entry.stack}\n```\n"
        sections.append(text)
    return header + DIGEST_SEPARATOR.join(sections)


format_for_claude = format_digest
