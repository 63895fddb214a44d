from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from lib_log_pipeline.adapters import RotatingFileSink, SimpleFormatter
from lib_log_pipeline.domain import LogLevel


def test_file_sink_appends_simple_lines(tmp_path: Path, make_entry) -> None:
    target = tmp_path / "logs" / "app.log"
    sink = RotatingFileSink(target)
    sink.deliver(make_entry(message="first"))
    sink.deliver(make_entry(message="second"))
    assert target.read_text(encoding="utf-8").splitlines() == [
        "2025-09-30T12:00:00.000Z [INFO ] first",
        "2025-09-30T12:00:00.000Z [INFO ] second",
    ]


def test_file_sink_json_mode(tmp_path: Path, make_entry) -> None:
    target = tmp_path / "app.jsonl"
    RotatingFileSink(target, json=True).deliver(make_entry(context={"k": "v"}))
    assert json.loads(target.read_text(encoding="utf-8"))["context"] == {"k": "v"}


def test_file_sink_respects_level(tmp_path: Path, make_entry) -> None:
    target = tmp_path / "app.log"
    RotatingFileSink(target, level=LogLevel.ERROR).deliver(make_entry(LogLevel.WARN))
    assert not target.exists()


def test_rotation_keeps_size_bound(tmp_path: Path, make_entry) -> None:
    target = tmp_path / "app.log"
    sink = RotatingFileSink(target, max_size=100, max_files=3)
    entry = make_entry(message="x" * 20)
    line_size = len(SimpleFormatter().format(entry)) + 1
    for _ in range(10):
        sink.deliver(entry)
        assert sink.current_size <= 100
    per_file = 100 // line_size
    assert target.stat().st_size <= 100
    assert target.with_name("app.log.1").stat().st_size == per_file * line_size
    assert target.with_name("app.log.2").exists()
    assert not target.with_name("app.log.3").exists()


def test_rotation_shifts_numbered_files(tmp_path: Path, make_entry) -> None:
    target = tmp_path / "app.log"
    sink = RotatingFileSink(target, max_size=1, max_files=4)
    for index in range(4):
        sink.deliver(make_entry(message=f"entry-{index}"))
    assert "entry-3" in target.read_text(encoding="utf-8")
    assert "entry-2" in target.with_name("app.log.1").read_text(encoding="utf-8")
    assert "entry-1" in target.with_name("app.log.2").read_text(encoding="utf-8")
    assert "entry-0" in target.with_name("app.log.3").read_text(encoding="utf-8")
    sink.deliver(make_entry(message="entry-4"))
    assert "entry-1" in target.with_name("app.log.3").read_text(encoding="utf-8")
    assert not target.with_name("app.log.4").exists()


def test_oversized_entry_on_fresh_file_is_written_without_rotation(tmp_path: Path, make_entry) -> None:
    target = tmp_path / "app.log"
    sink = RotatingFileSink(target, max_size=10)
    sink.deliver(make_entry(message="much longer than ten bytes"))
    assert target.exists()
    assert not target.with_name("app.log.1").exists()


def test_counter_is_seeded_from_existing_file(tmp_path: Path) -> None:
    target = tmp_path / "app.log"
    target.write_text("previous run\n", encoding="utf-8")
    assert RotatingFileSink(target).current_size == len("previous run\n")


def test_size_counts_utf8_bytes(tmp_path: Path, make_entry) -> None:
    sink = RotatingFileSink(tmp_path / "app.log")
    entry = make_entry(message="ünïcödé")
    sink.deliver(entry)
    assert sink.current_size == len((SimpleFormatter().format(entry) + "\n").encode("utf-8"))


def test_write_failure_is_logged_not_raised(tmp_path: Path, make_entry, caplog: pytest.LogCaptureFixture) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    sink = RotatingFileSink(blocker / "app.log")
    with caplog.at_level(logging.ERROR):
        sink.deliver(make_entry())
    assert sink.current_size == 0
    assert "Failed to write log to file" in caplog.text


@pytest.mark.parametrize("kwargs", [{"max_size": 0}, {"max_files": 0}])
def test_invalid_limits_rejected(tmp_path: Path, kwargs: dict[str, int]) -> None:
    with pytest.raises(ValueError):
        RotatingFileSink(tmp_path / "app.log", **kwargs)


def test_first_rotation_preserves_previous_content_exactly(tmp_path: Path, make_entry) -> None:
    target = tmp_path / "app.log"
    sink = RotatingFileSink(target, max_size=100)
    sink.deliver(make_entry(message="a" * 30))
    before = target.read_bytes()
    sink.deliver(make_entry(message="b" * 30))
    assert target.with_name("app.log.1").read_bytes() == before
    assert b"b" * 30 in target.read_bytes()
