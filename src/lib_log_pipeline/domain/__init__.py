"""Domain entities and value objects used by the logging pipeline."""

from __future__ import annotations

from .entry import ErrorInfo, LogEntry, format_timestamp
from .levels import LogLevel
from .ring_buffer import RingBuffer
from .values import ValueKind

__all__ = [
    "ErrorInfo",
    "LogEntry",
    "LogLevel",
    "RingBuffer",
    "ValueKind",
    "format_timestamp",
]
