from __future__ import annotations

import json

from conftest import nested_mapping

from lib_log_pipeline.adapters import ConsoleFormatter, DevFormatter, JsonFormatter, SimpleFormatter
from lib_log_pipeline.adapters._formatting import CIRCULAR_PLACEHOLDER, UNSERIALIZABLE_PLACEHOLDER, to_jsonable
from lib_log_pipeline.domain import ErrorInfo, LogLevel

_ERROR = ErrorInfo(name="ValueError", message="bad input", stack="Traceback\n  line 1")


def test_simple_formatter_single_line(make_entry) -> None:
    line = SimpleFormatter().format(make_entry(LogLevel.WARN, "disk low", context={"free": 5}))
    assert line == '2025-09-30T12:00:00.000Z [WARN ] disk low {"free": 5}'


def test_simple_formatter_appends_error_and_stack(make_entry) -> None:
    text = SimpleFormatter().format(make_entry(LogLevel.ERROR, "failed", error=_ERROR))
    assert text == "2025-09-30T12:00:00.000Z [ERROR] failed ERROR: bad input\nSTACK: Traceback\n  line 1"


def test_json_formatter_matches_line_schema(make_entry) -> None:
    entry = make_entry(LogLevel.ERROR, "failed", context={"user": "ada"}, error=_ERROR, meta={"logger": "api"})
    payload = json.loads(JsonFormatter().format(entry))
    assert payload == {
        "timestamp": "2025-09-30T12:00:00.000Z",
        "level": "ERROR",
        "message": "failed",
        "context": {"user": "ada"},
        "error": {"name": "ValueError", "message": "bad input", "stack": "Traceback\n  line 1"},
        "meta": {"logger": "api"},
    }


def test_json_formatter_survives_cyclic_context(make_entry) -> None:
    context: dict[str, object] = {"name": "node"}
    context["self"] = context
    payload = json.loads(JsonFormatter().format(make_entry(context=context)))
    assert payload["context"] == {"name": "node", "self": CIRCULAR_PLACEHOLDER}


def test_formatters_never_raise_on_unserialisable_values(make_entry) -> None:
    class Opaque:
        def __repr__(self) -> str:
            return "<opaque>"

    entry = make_entry(context={"obj": Opaque(), "raw": b"\xffbytes", "nan": float("nan")})
    payload = json.loads(JsonFormatter().format(entry))
    assert payload["context"]["obj"] == "<opaque>"
    assert payload["context"]["nan"] is None
    assert "<opaque>" in SimpleFormatter().format(entry)


def test_json_formatter_replaces_too_deep_context(make_entry) -> None:
    entry = make_entry(message="deep", context=nested_mapping(5000), meta={"logger": "api"})
    payload = json.loads(JsonFormatter().format(entry))
    assert payload["message"] == "deep"
    assert payload["context"] == UNSERIALIZABLE_PLACEHOLDER
    assert payload["meta"] == {"logger": "api"}


def test_text_formatters_survive_too_deep_context(make_entry) -> None:
    entry = make_entry(message="deep", context=nested_mapping(5000))
    assert SimpleFormatter().format(entry).endswith(f"deep \"{UNSERIALIZABLE_PLACEHOLDER}\"")
    assert DevFormatter().format(entry).startswith("12:00:00.000")


def test_shared_references_are_not_circular() -> None:
    shared = {"x": 1}
    assert to_jsonable({"a": shared, "b": shared}) == {"a": {"x": 1}, "b": {"x": 1}}


def test_console_formatter_layout(make_entry) -> None:
    entry = make_entry(
        LogLevel.ERROR,
        "login failed",
        context={"user": "ada", "attempt": 3, "ok": False},
        error=_ERROR,
        meta={"logger": "auth"},
    )
    text = ConsoleFormatter().format(entry)
    assert text == (
        '2025-09-30 12:00:00.000 [ERROR] login failed {user="ada" attempt=3 ok=false} '
        'ValueError: bad input [logger="auth"]'
    )


def test_console_formatter_without_timestamp(make_entry) -> None:
    assert ConsoleFormatter(timestamp=False).format(make_entry()) == "[INFO ] hello"


def test_console_segments_carry_style_keys(make_entry) -> None:
    keys = [key for _, key in ConsoleFormatter().segments(make_entry(context={"a": 1}))]
    assert keys == ["timestamp", None, "message", "context"]


def test_dev_formatter_multiline(make_entry) -> None:
    text = DevFormatter().format(make_entry(LogLevel.ERROR, "boom", context={"a": 1}, error=_ERROR))
    assert text.splitlines() == [
        "12:00:00.000 ✖ boom",
        "Context: {",
        '    "a": 1',
        "  }",
        "Error: bad input",
        "  Traceback",
        "    line 1",
    ]
