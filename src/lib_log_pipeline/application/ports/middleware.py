"""Middleware contract for the entry processing chain."""

from __future__ import annotations

from typing import Callable

from lib_log_pipeline.domain.entry import LogEntry

Proceed = Callable[[], None]
"""Zero-argument continuation handed to each middleware."""

Middleware = Callable[[LogEntry, Proceed], None]
"""Mutates the entry in place and calls ``proceed`` to continue the chain."""


__all__ = ["Middleware", "Proceed"]
