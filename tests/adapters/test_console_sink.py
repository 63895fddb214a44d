from __future__ import annotations

import io
import json

from rich.console import Console

from lib_log_pipeline.adapters import RichConsoleSink
from lib_log_pipeline.domain import LogLevel


def _console() -> Console:
    return Console(file=io.StringIO(), record=True, width=200, color_system=None)


def test_rich_console_sink_renders_expected_line(record_console, make_entry) -> None:
    sink = RichConsoleSink(console=record_console, level=LogLevel.TRACE)
    sink.deliver(make_entry(context={"foo": "bar"}, meta={"logger": "api"}))
    output = record_console.export_text()
    assert "[INFO ] hello" in output
    assert 'foo="bar"' in output
    assert 'logger="api"' in output


def test_rich_console_sink_filters_by_level(record_console, make_entry) -> None:
    sink = RichConsoleSink(console=record_console, level=LogLevel.WARN)
    sink.deliver(make_entry(LogLevel.INFO, "quiet"))
    assert record_console.export_text() == ""


def test_errors_go_to_error_console(make_entry) -> None:
    out, err = _console(), _console()
    sink = RichConsoleSink(console=out, error_console=err)
    sink.deliver(make_entry(LogLevel.INFO, "fine"))
    sink.deliver(make_entry(LogLevel.ERROR, "broken"))
    assert "fine" in out.export_text()
    assert "broken" not in out.export_text()
    assert "broken" in err.export_text()


def test_json_mode_prints_json_lines(record_console, make_entry) -> None:
    sink = RichConsoleSink(console=record_console, json=True)
    sink.deliver(make_entry(context={"n": 1}))
    payload = json.loads(record_console.export_text().strip())
    assert payload["message"] == "hello"
    assert payload["context"] == {"n": 1}


def test_markup_in_messages_is_printed_verbatim(record_console, make_entry) -> None:
    sink = RichConsoleSink(console=record_console, colors=False)
    sink.deliver(make_entry(message="[bold]not markup[/bold]"))
    assert "[bold]not markup[/bold]" in record_console.export_text()


def test_custom_styles_accept_level_names(record_console, make_entry) -> None:
    sink = RichConsoleSink(console=record_console, styles={"info": "bold magenta"})
    sink.deliver(make_entry())
    assert "hello" in record_console.export_text()
