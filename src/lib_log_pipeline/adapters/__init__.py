"""Concrete sinks and formatters plugged into the pipeline ports."""

from __future__ import annotations

from .console.rich_console import RichConsoleSink
from .file import RotatingFileSink
from .formatters import ConsoleFormatter, DevFormatter, JsonFormatter, SimpleFormatter
from .memory import MemorySink
from .network import NetworkSink

__all__ = [
    "ConsoleFormatter",
    "DevFormatter",
    "JsonFormatter",
    "MemorySink",
    "NetworkSink",
    "RichConsoleSink",
    "RotatingFileSink",
    "SimpleFormatter",
]
