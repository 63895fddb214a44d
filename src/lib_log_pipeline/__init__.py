"""Structured logging pipeline with middleware and pluggable sinks.

Entries flow from a :class:`Logger` through its middleware chain to every
registered sink; each sink filters by its own level and failures stay local to
the sink that raised them.
"""

from __future__ import annotations

from .adapters import (
    ConsoleFormatter,
    DevFormatter,
    JsonFormatter,
    MemorySink,
    NetworkSink,
    RichConsoleSink,
    RotatingFileSink,
    SimpleFormatter,
)
from .application.ports import FormatterPort, Middleware, SinkPort
from .domain import ErrorInfo, LogEntry, LogLevel
from .runtime import Logger, LoggerConfig, LoggerRegistry, create_logger, middleware, summary_info

__all__ = [
    "ConsoleFormatter",
    "DevFormatter",
    "ErrorInfo",
    "FormatterPort",
    "JsonFormatter",
    "LogEntry",
    "LogLevel",
    "Logger",
    "LoggerConfig",
    "LoggerRegistry",
    "MemorySink",
    "Middleware",
    "NetworkSink",
    "RichConsoleSink",
    "RotatingFileSink",
    "SimpleFormatter",
    "SinkPort",
    "create_logger",
    "middleware",
    "summary_info",
]
