from __future__ import annotations

import io
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import pytest
from rich.console import Console

from lib_log_pipeline.domain import LogEntry, LogLevel

BASE_TIME = datetime(2025, 9, 30, 12, 0, tzinfo=timezone.utc)


class FixedClock:
    """Clock returning a fixed instant that tests advance explicitly."""

    def __init__(self, start: datetime = BASE_TIME) -> None:
        self.current = start

    def now(self) -> datetime:
        return self.current

    def advance(self, **delta: float) -> None:
        self.current += timedelta(**delta)


class RecordingSink:
    """Synchronous sink storing every delivered entry."""

    def __init__(self, name: str = "recorder", level: LogLevel = LogLevel.TRACE) -> None:
        self.name = name
        self.level = level
        self.entries: list[LogEntry] = []
        self.released = 0

    def deliver(self, entry: LogEntry) -> None:
        self.entries.append(entry)

    def release(self) -> None:
        self.released += 1

    @property
    def messages(self) -> list[str]:
        return [entry.message for entry in self.entries]


class ExplodingSink(RecordingSink):
    """Sink whose delivery always raises."""

    def deliver(self, entry: LogEntry) -> None:
        raise RuntimeError(f"{self.name} exploded")


class FakeResponse:
    def __init__(self, status_code: int = 200) -> None:
        self.status_code = status_code
        self.reason = "OK" if status_code < 400 else "Server Error"

    @property
    def ok(self) -> bool:
        return self.status_code < 400


class FakeSession:
    """``requests.Session`` stand-in recording POST calls."""

    def __init__(self, statuses: list[int] | None = None, error: Exception | None = None) -> None:
        self.statuses = list(statuses or [])
        self.error = error
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        status = self.statuses.pop(0) if self.statuses else 200
        return FakeResponse(status)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def record_console() -> Console:
    """Rich console capturing output for assertions."""

    return Console(file=io.StringIO(), record=True, width=200, color_system=None, force_terminal=False)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def make_entry() -> Callable[..., LogEntry]:
    def factory(level: LogLevel | str = LogLevel.INFO, message: str = "hello", **fields: Any) -> LogEntry:
        return LogEntry(level=level, message=message, timestamp=fields.pop("timestamp", BASE_TIME), **fields)

    return factory


def nested_mapping(depth: int) -> dict[str, Any]:
    """Return a dict nested ``depth`` levels deep, beyond the recursion limit for large depths."""

    root: dict[str, Any] = {}
    node = root
    for _ in range(depth):
        node["next"] = {}
        node = node["next"]
    return root
