"""Formatters turning a :class:`LogEntry` into text for the sinks.

Purpose
-------
Provide the interchangeable layouts injected into the console and file sinks.
Every formatter is a pure function of the entry (and its own options); none of
them raise, even for cyclic or unserialisable context values.

Contents
--------
* :class:`SimpleFormatter` – single-line file layout.
* :class:`JsonFormatter` – one JSON object per line.
* :class:`ConsoleFormatter` – human-readable console layout split into styled segments.
* :class:`DevFormatter` – multi-line layout with icons, indented context and stack.
* :func:`select_formatter` – ``json`` flag helper used by sink constructors.
"""

from __future__ import annotations

from typing import Any, Mapping

from lib_log_pipeline.application.ports.formatter import FormatterPort
from lib_log_pipeline.domain.entry import LogEntry, format_timestamp
from lib_log_pipeline.domain.values import ValueKind

from ._formatting import build_entry_payload, dumps_safe

Segment = tuple[str, str | None]
"""Text fragment paired with a style key (``None`` keeps the level style)."""


class SimpleFormatter(FormatterPort):
    """``<ISO ts> [<LEVEL>] <message> <JSON context> ERROR: <msg>`` plus the stack.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> from lib_log_pipeline.domain.levels import LogLevel
    >>> entry = LogEntry(LogLevel.INFO, 'ready', datetime(2025, 9, 30, 12, 0, tzinfo=timezone.utc), context={'port': 80})
    >>> SimpleFormatter().format(entry)
    '2025-09-30T12:00:00.000Z [INFO ] ready {"port": 80}'
    """

    def format(self, entry: LogEntry) -> str:
        formatted = f"{format_timestamp(entry.timestamp)} [{entry.level.name:<5}] {entry.message}"
        if entry.context:
            formatted += f" {dumps_safe(entry.context)}"
        if entry.error is not None:
            formatted += f" ERROR: {entry.error.message}"
            if entry.error.stack:
                formatted += f"\nSTACK: {entry.error.stack}"
        return formatted


class JsonFormatter(FormatterPort):
    """Structured layout matching the network wire schema."""

    def format(self, entry: LogEntry) -> str:
        return dumps_safe(build_entry_payload(entry))


class ConsoleFormatter(FormatterPort):
    """Human-readable console layout.

    ``YYYY-MM-DD HH:MM:SS.mmm [LEVEL] message {key="value"} Name: message [meta=...]``
    """

    def __init__(self, *, timestamp: bool = True) -> None:
        self._timestamp = timestamp

    def format(self, entry: LogEntry) -> str:
        return " ".join(text for text, _ in self.segments(entry))

    def segments(self, entry: LogEntry) -> list[Segment]:
        """Return the layout as ``(text, style_key)`` pairs for colour rendering."""

        parts: list[Segment] = []
        if self._timestamp:
            ts = entry.timestamp
            parts.append((f"{ts:%Y-%m-%d %H:%M:%S}.{ts.microsecond // 1000:03d}", "timestamp"))
        parts.append((f"[{entry.level.name:<5}]", None))
        parts.append((entry.message, "message"))
        if entry.context:
            parts.append((f"{{{_format_pairs(entry.context)}}}", "context"))
        if entry.error is not None:
            parts.append((f"{entry.error.name}: {entry.error.message}", "error"))
        if entry.meta:
            parts.append((f"[{_format_pairs(entry.meta)}]", "meta"))
        return parts


class DevFormatter(FormatterPort):
    """Development layout with level icons and indented details."""

    def format(self, entry: LogEntry) -> str:
        ts = entry.timestamp
        formatted = f"{ts:%H:%M:%S}.{ts.microsecond // 1000:03d} {entry.level.icon} {entry.message}"
        if entry.context:
            formatted += f"\nContext: {_indent(dumps_safe(entry.context, indent=2))}"
        if entry.error is not None:
            formatted += f"\nError: {entry.error.message}"
            if entry.error.stack:
                formatted += f"\n{_indent(entry.error.stack, first=True)}"
        return formatted


def select_formatter(*, json: bool, fallback: FormatterPort) -> FormatterPort:
    """Return :class:`JsonFormatter` when ``json`` is set, else ``fallback``."""

    return JsonFormatter() if json else fallback


def _format_pairs(values: Mapping[str, Any]) -> str:
    return " ".join(f"{key}={_format_value(value)}" for key, value in values.items())


def _format_value(value: Any) -> str:
    kind = ValueKind.of(value)
    if kind is ValueKind.STRING:
        return f'"{value}"'
    if kind is ValueKind.STRUCTURED:
        return dumps_safe(value)
    if kind is ValueKind.NULL:
        return "null"
    if kind is ValueKind.BOOLEAN:
        return "true" if value else "false"
    return str(value)


def _indent(text: str, *, first: bool = False) -> str:
    lines = text.split("\n")
    if first:
        return "\n".join(f"  {line}" for line in lines)
    return "\n".join([lines[0], *(f"  {line}" for line in lines[1:])])


__all__ = [
    "ConsoleFormatter",
    "DevFormatter",
    "JsonFormatter",
    "Segment",
    "SimpleFormatter",
    "select_formatter",
]
