from __future__ import annotations

import re
from datetime import timedelta

from conftest import BASE_TIME

from lib_log_pipeline.adapters import MemorySink
from lib_log_pipeline.domain import LogLevel


def _filled(make_entry) -> MemorySink:
    sink = MemorySink()
    levels = [LogLevel.DEBUG, LogLevel.INFO, LogLevel.WARN, LogLevel.ERROR]
    for minute, level in enumerate(levels):
        sink.deliver(make_entry(level, f"{level.name.lower()} event", timestamp=BASE_TIME + timedelta(minutes=minute)))
    return sink


def test_memory_sink_evicts_oldest(make_entry) -> None:
    sink = MemorySink(max_size=2)
    for message in ("a", "b", "c"):
        sink.deliver(make_entry(message=message))
    assert [entry.message for entry in sink.get_entries()] == ["b", "c"]
    assert len(sink) == 2


def test_get_entries_returns_copy(make_entry) -> None:
    sink = _filled(make_entry)
    sink.get_entries().clear()
    assert len(sink) == 4


def test_query_by_level_and_levels(make_entry) -> None:
    sink = _filled(make_entry)
    assert [entry.message for entry in sink.query(level="warn")] == ["warn event"]
    assert [entry.message for entry in sink.query(level=[LogLevel.DEBUG, LogLevel.ERROR])] == ["debug event", "error event"]


def test_query_time_window_is_inclusive(make_entry) -> None:
    sink = _filled(make_entry)
    window = sink.query(since=BASE_TIME + timedelta(minutes=1), until=BASE_TIME + timedelta(minutes=2))
    assert [entry.level for entry in window] == [LogLevel.INFO, LogLevel.WARN]


def test_query_message_substring_and_pattern(make_entry) -> None:
    sink = _filled(make_entry)
    assert len(sink.query(message="event")) == 4
    assert [entry.message for entry in sink.query(message=re.compile(r"^(info|error)"))] == ["info event", "error event"]


def test_query_offset_and_limit(make_entry) -> None:
    sink = _filled(make_entry)
    assert [entry.level for entry in sink.query(offset=1, limit=2)] == [LogLevel.INFO, LogLevel.WARN]


def test_release_clears_entries(make_entry) -> None:
    sink = _filled(make_entry)
    sink.release()
    assert sink.get_entries() == []
