"""Port for formatters injected into text-based sinks."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from lib_log_pipeline.domain.entry import LogEntry


@runtime_checkable
class FormatterPort(Protocol):
    """Render an entry as a single text block, deterministically."""

    def format(self, entry: LogEntry) -> str:
        """Return the textual representation of ``entry``."""


__all__ = ["FormatterPort"]
