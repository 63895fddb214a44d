"""Ports (protocols) the application layer depends on."""

from __future__ import annotations

from .formatter import FormatterPort
from .middleware import Middleware, Proceed
from .sink import SinkPort, sink_accepts
from .time import ClockPort, SystemClock

__all__ = [
    "ClockPort",
    "FormatterPort",
    "Middleware",
    "Proceed",
    "SinkPort",
    "SystemClock",
    "sink_accepts",
]
