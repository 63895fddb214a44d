"""Domain entry describing a single structured log occurrence.

Purpose
-------
Provide the record threaded through the middleware chain and handed to every
sink. Unlike most domain objects the entry is mutable: middleware enrich it in
place before the fan-out takes over.

Contents
--------
* :class:`ErrorInfo` – frozen capture of a failure (name, message, stack).
* :class:`LogEntry` – the entry itself with :meth:`LogEntry.to_dict`.
* :func:`format_timestamp` – ISO-8601 rendering shared by all formatters.

System Role
-----------
Sits in the domain layer so the runtime, the use cases and the adapters agree
on one data contract.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping

from .levels import LogLevel


def _ensure_aware(ts: datetime) -> datetime:
    """Validate that ``ts`` is timezone-aware and normalise to UTC."""
    if ts.tzinfo is None or ts.tzinfo.utcoffset(ts) is None:
        raise ValueError("timestamp must be timezone-aware")
    return ts.astimezone(timezone.utc)


def format_timestamp(ts: datetime) -> str:
    """Return ``ts`` as an ISO-8601 UTC string with millisecond precision.

    Examples
    --------
    >>> format_timestamp(datetime(2025, 9, 30, 12, 0, tzinfo=timezone.utc))
    '2025-09-30T12:00:00.000Z'
    """
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(slots=True, frozen=True)
class ErrorInfo:
    """Captured failure attached to an entry.

    Attributes
    ----------
    name:
        Exception class name (``ValueError``).
    message:
        ``str(exc)``.
    stack:
        Formatted traceback, ``None`` when the exception was never raised.
    """

    name: str
    message: str
    stack: str | None = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ErrorInfo":
        stack: str | None = None
        if exc.__traceback__ is not None:
            stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)).rstrip("\n")
        return cls(name=type(exc).__name__, message=str(exc), stack=stack)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "message": self.message, "stack": self.stack}


@dataclass(slots=True)
class LogEntry:
    """Log entry travelling through the middleware chain and the sinks.

    Attributes
    ----------
    level:
        :class:`LogLevel` severity.
    message:
        Text passed by the caller.
    timestamp:
        Creation time in timezone-aware UTC; assigned once by the logger.
    context:
        Optional caller-supplied mapping.
    error:
        Optional :class:`ErrorInfo`.
    meta:
        Metadata inherited from the logger and enriched by middleware; always a dict.
    """

    level: LogLevel
    message: str
    timestamp: datetime
    context: Mapping[str, Any] | None = None
    error: ErrorInfo | None = None
    meta: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.level = LogLevel.coerce(self.level)
        self.timestamp = _ensure_aware(self.timestamp)
        self.meta = dict(self.meta) if self.meta is not None else {}

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON line schema (values are not yet made JSON-safe)."""

        data: dict[str, Any] = {
            "timestamp": format_timestamp(self.timestamp),
            "level": self.level.name,
            "message": self.message,
        }
        if self.context is not None:
            data["context"] = self.context
        if self.error is not None:
            data["error"] = self.error.to_dict()
        if self.meta:
            data["meta"] = self.meta
        return data


__all__ = ["ErrorInfo", "LogEntry", "format_timestamp"]
