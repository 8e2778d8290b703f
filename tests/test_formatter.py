import json

from applog.core.types import LogEntry, LogLevel
from applog.fmt.formatter import format_console, format_digest, format_for_claude, format_line, to_json


def _fenced_json(digest: str) -> str:
    start = digest.index("```json\n") + len("```json\n")
    end = digest.index("\n```", start)
    return digest[start:end]


def test_format_line_with_context_and_stack() -> None:
    entry = LogEntry(
        level=LogLevel.ERROR,
        message="upload failed",
        context={"photo": "a.jpg", "size": 12},
        stack="Traceback\n  boom",
        timestamp="2026-01-01T00:00:00.000+00:00",
    )

    assert format_line(entry) == (
        '[2026-01-01T00:00:00.000+00:00] [ERROR] upload failed | {"photo":"a.jpg","size":12}\n'
        "Traceback\n  boom"
    )


def test_format_line_plain() -> None:
    entry = LogEntry(level=LogLevel.INFO, message="ready", timestamp="t0")
    assert format_line(entry) == "[t0] [INFO] ready"


def test_format_line_survives_unserializable_context() -> None:
    loop: dict[str, object] = {}
    loop["self"] = loop
    entry = LogEntry(level=LogLevel.WARN, message="odd", context={"obj": object()}, timestamp="t0")

    assert format_line(entry).startswith("[t0] [WARN] odd | {")
    assert "odd" in format_line(LogEntry(level=LogLevel.WARN, message="odd", context=loop))


def test_console_line_colorized_by_level() -> None:
    entry = LogEntry(level=LogLevel.WARN, message="slow")
    assert format_console(entry).startswith("\x1b[33m[WARN]\x1b[0m slow")
    assert format_console(entry, color=False) == "[WARN] slow"


def test_empty_digest_is_header_only() -> None:
    assert format_for_claude([], now="2026-01-01T00:00:00.000+00:00") == (
        "# Application Logs (2026-01-01T00:00:00.000+00:00)\n\n"
    )


def test_digest_context_block_parses_back() -> None:
    entry = LogEntry(level=LogLevel.ERROR, message="boom", context={"code": 42}, timestamp="t1")
    digest = format_digest([entry], now="now")

    assert "## [ERROR] t1\n**Message:** boom\n" in digest
    assert json.loads(_fenced_json(digest)) == {"code": 42}


def test_digest_sections_keep_caller_order_and_include_stack() -> None:
    first = LogEntry(level=LogLevel.INFO, message="first", timestamp="t1")
    second = LogEntry(level=LogLevel.ERROR, message="second", stack="Trace", timestamp="t2")
    digest = format_digest([second, first], now="now")

    sections = digest.split("\n---\n\n")
    assert len(sections) == 2
    assert "second" in sections[0]
    assert "**Stack Trace:**\n```\nTrace\n```\n" in sections[0]
    assert "**Context:**" not in digest
    assert sections[1].startswith("## [INFO] t1")


class _NoStr:
    def __str__(self) -> str:
        raise RuntimeError("no str")


def test_to_json_never_raises() -> None:
    assert to_json({"code": 42}) == '{"code":42}'
    assert to_json({"obj": _NoStr()}).startswith("{'obj': <")
    deep: list[object] = []
    for _ in range(5000):
        deep = [deep]
    assert to_json(deep)
