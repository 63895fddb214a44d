from __future__ import annotations

import json
from pathlib import Path

import pytest
from conftest import RecordingSink

from lib_log_pipeline import LoggerConfig, LoggerRegistry, LogLevel, create_logger
from lib_log_pipeline.adapters import RichConsoleSink, RotatingFileSink
from lib_log_pipeline.runtime.registry import PRODUCTION_MAX_FILES, PRODUCTION_MAX_SIZE


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("LOG_ENVIRONMENT", "LOG_LEVEL", "LOG_FILE"):
        monkeypatch.delenv(name, raising=False)


def test_create_adds_logger_name_to_meta(clock) -> None:
    sink = RecordingSink()
    registry = LoggerRegistry(LoggerConfig(default_meta={"service": "api"}), clock=clock)
    logger = registry.create("db", sinks=[sink], level="debug")
    logger.debug("connected")
    assert sink.entries[0].meta == {"service": "api", "logger": "db"}
    assert registry.names() == ["db"]


def test_get_returns_existing_or_creates() -> None:
    registry = LoggerRegistry()
    created = registry.get("api")
    assert registry.get("api") is created
    assert created.get_level() is LogLevel.INFO


def test_registries_are_independent() -> None:
    first, second = LoggerRegistry(), LoggerRegistry()
    first.create("api")
    assert second.names() == []


def test_registry_middleware_applies_to_created_loggers(clock) -> None:
    sink = RecordingSink()

    def tag(entry, proceed):
        entry.meta["tagged"] = True
        proceed()

    registry = LoggerRegistry(middleware=[tag], clock=clock)
    registry.create("api", sinks=[sink]).info("hi")
    assert sink.entries[0].meta["tagged"] is True


def test_development_profile() -> None:
    logger = LoggerRegistry().create_development_logger("dev")
    sinks = logger.get_sinks()
    assert logger.get_level() is LogLevel.DEBUG
    assert len(sinks) == 1 and isinstance(sinks[0], RichConsoleSink)
    assert sinks[0].level is LogLevel.DEBUG


def test_production_profile(tmp_path: Path) -> None:
    target = tmp_path / "prod.log"
    logger = LoggerRegistry().create_production_logger("prod", target)
    console, file_sink = logger.get_sinks()
    assert logger.get_level() is LogLevel.INFO
    assert isinstance(console, RichConsoleSink)
    assert isinstance(file_sink, RotatingFileSink)
    assert file_sink.path == target
    assert (PRODUCTION_MAX_SIZE, PRODUCTION_MAX_FILES) == (50 * 1024 * 1024, 10)
    logger.remove_sink("console")
    logger.info("persisted", {"k": 1})
    payload = json.loads(target.read_text(encoding="utf-8"))
    assert payload["meta"] == {"logger": "prod"}
    with pytest.raises(SystemExit):
        logger.fatal("shutting down")


def test_test_profile_is_silent() -> None:
    logger = LoggerRegistry().create_test_logger("unit")
    assert logger.is_silent() is True
    assert logger.get_level() is LogLevel.TRACE
    assert logger.get_sinks() == []


@pytest.mark.parametrize(
    "environment, silent, level",
    [("test", True, LogLevel.TRACE), ("development", False, LogLevel.DEBUG), ("unknown", False, LogLevel.DEBUG)],
)
def test_create_logger_selects_profile(environment: str, silent: bool, level: LogLevel) -> None:
    logger = create_logger(LoggerRegistry(), "svc", environment)
    assert logger.is_silent() is silent
    assert logger.get_level() is level


def test_create_logger_reads_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("LOG_ENVIRONMENT", "production")
    monkeypatch.setenv("LOG_FILE", str(tmp_path / "env.log"))
    monkeypatch.setenv("LOG_LEVEL", "warning")
    logger = create_logger(LoggerRegistry(), "svc")
    assert logger.get_level() is LogLevel.WARN
    assert logger.get_sinks()[1].path == tmp_path / "env.log"


def test_close_all_releases_and_forgets() -> None:
    sink = RecordingSink()
    registry = LoggerRegistry()
    registry.create("a", sinks=[sink])
    registry.create("b", sinks=[RecordingSink()])
    registry.close_all()
    assert sink.released == 1
    assert registry.names() == []
