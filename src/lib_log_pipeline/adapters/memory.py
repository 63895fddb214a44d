"""In-memory sink retaining recent entries for inspection and tests."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Iterable, Pattern

from lib_log_pipeline.application.ports.sink import SinkPort
from lib_log_pipeline.domain.entry import LogEntry
from lib_log_pipeline.domain.levels import LogLevel
from lib_log_pipeline.domain.ring_buffer import RingBuffer


class MemorySink(SinkPort):
    """Keep the newest ``max_size`` entries in a ring buffer.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> sink = MemorySink(max_size=2)
    >>> for text in ('a', 'b', 'c'):
    ...     sink.deliver(LogEntry(LogLevel.INFO, text, datetime(2025, 9, 30, tzinfo=timezone.utc)))
    >>> [entry.message for entry in sink.get_entries()]
    ['b', 'c']
    """

    def __init__(self, *, level: LogLevel | str = LogLevel.TRACE, max_size: int = 1000, name: str = "memory") -> None:
        self.name = name
        self.level = LogLevel.coerce(level)
        self._buffer = RingBuffer(max_entries=max_size)

    def deliver(self, entry: LogEntry) -> None:
        if entry.level < self.level:
            return
        self._buffer.append(entry)

    def get_entries(self) -> list[LogEntry]:
        """Return a copy of the retained entries, oldest first."""

        return self._buffer.snapshot()

    def query(
        self,
        *,
        level: LogLevel | str | Iterable[LogLevel | str] | None = None,
        since: datetime | None = None,
        until: datetime | None = None,
        message: str | Pattern[str] | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[LogEntry]:
        """Filter the retained entries.

        ``level`` matches one level or any of several; ``since``/``until`` are
        inclusive bounds; a string ``message`` is a substring match and a
        compiled pattern is searched.
        """
        levels = _coerce_levels(level)
        matches: list[LogEntry] = []
        for entry in self._buffer.snapshot():
            if levels is not None and entry.level not in levels:
                continue
            if since is not None and entry.timestamp < since:
                continue
            if until is not None and entry.timestamp > until:
                continue
            if message is not None and not _message_matches(entry.message, message):
                continue
            matches.append(entry)
        selected = matches[offset:]
        return selected if limit is None else selected[:limit]

    def clear(self) -> None:
        self._buffer.clear()

    def release(self) -> None:
        self.clear()

    def __len__(self) -> int:
        return len(self._buffer)


def _coerce_levels(level: LogLevel | str | Iterable[LogLevel | str] | None) -> frozenset[LogLevel] | None:
    if level is None:
        return None
    if isinstance(level, (LogLevel, str, int)):
        return frozenset({LogLevel.coerce(level)})
    return frozenset(LogLevel.coerce(item) for item in level)


def _message_matches(text: str, message: str | Pattern[str]) -> bool:
    if isinstance(message, re.Pattern):
        return message.search(text) is not None
    return message in text


__all__ = ["MemorySink"]
