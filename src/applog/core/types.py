"""Canonical log types shared across applog layers."""

from __future__ import annotations

import json
from collections.abc import Mapping
from copy import deepcopy
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

_PRIORITIES = {"debug": 0, "info": 1, "warn": 2, "error": 3}
CIRCULAR = "[Circular]"


class LogLevel(str, Enum):
    """Severity levels, totally ordered by priority."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"

    @property
    def priority(self) -> int:
        return _PRIORITIES[self.value]

    @classmethod
    def parse(cls, value: object, default: LogLevel | None = None) -> LogLevel | None:
        """Map a raw value to a level, returning ``default`` when unrecognized."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value in _PRIORITIES:
            return cls(value)
        return default


def utc_now_iso() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds")


@dataclass(frozen=True, slots=True)
class LogEntry:
    """Immutable record of one emitted event.

    ``context`` is deep-copied on creation so callers mutating their own
    mapping afterwards cannot alter a buffered entry. Lone surrogates in text
    (``surrogateescape`` file names, ``"\\ud800"`` JSON escapes) are replaced by
    their backslash form so every entry encodes as UTF-8.
    """

    level: LogLevel
    message: str
    context: dict[str, Any] | None = None
    stack: str | None = None
    timestamp: str = field(default_factory=utc_now_iso)

    def __post_init__(self) -> None:
        object.__setattr__(self, "level", LogLevel(self.level))
        object.__setattr__(self, "message", _clean_text(str(self.message)))
        if self.stack is not None:
            object.__setattr__(self, "stack", _clean_text(self.stack))
        if self.context is not None:
            object.__setattr__(self, "context", _copy_context(self.context))

    def to_dict(self) -> dict[str, Any]:
        """JSON shape used by the retrieval API; absent optionals are omitted."""
        payload: dict[str, Any] = {
            "timestamp": self.timestamp,
            "level": self.level.value,
            "message": self.message,
        }
        if self.context is not None:
            payload["context"] = _json_ready(self.context)
        if self.stack is not None:
            payload["stack"] = self.stack
        return payload


def _json_ready(value: Any) -> Any:
    try:
        return json.loads(json.dumps(value, default=_str_or_type))
    except Exception:
        return {"value": _str_or_type(value)}


def _str_or_type(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        return f"<{type(value).__name__}>"


def _clean_text(text: str) -> str:
    return text.encode("utf-8", errors="backslashreplace").decode("utf-8")


def _copy_context(context: Mapping[str, Any]) -> dict[str, Any]:
    if not isinstance(context, Mapping):
        return {"value": _copy_value(context)}
    return _copy_value(context)


def _copy_value(value: Any, path: frozenset[int] = frozenset()) -> Any:
    if isinstance(value, str):
        return _clean_text(value)
    if isinstance(value, (Mapping, list, tuple)):
        if id(value) in path:
            return CIRCULAR
        path = path | {id(value)}
        if isinstance(value, Mapping):
            return {
                (_clean_text(key) if isinstance(key, str) else key): _copy_value(item, path)
                for key, item in value.items()
            }
        return [_copy_value(item, path) for item in value]
    try:
        return deepcopy(value)
    except Exception:
        # Uncopyable values (locks, sockets...) keep their reference.
        return value
