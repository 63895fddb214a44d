"""Sink port describing the contract every log destination implements.

Purpose
-------
Define the narrow protocol the fan-out use case depends on so console, file,
network and in-memory adapters (and host-supplied sinks) plug in without the
application layer knowing their internals.

Contents
--------
* :class:`SinkPort` – runtime-checkable protocol (``name``, ``level``,
  ``deliver`` and an optional ``release``).
* :func:`sink_accepts` – per-sink level gate shared by the fan-out and adapters.

System Role
-----------
Marks the boundary between the pipeline core and the adapters layer.
"""

from __future__ import annotations

from typing import Awaitable, Protocol, runtime_checkable

from lib_log_pipeline.domain.entry import LogEntry
from lib_log_pipeline.domain.levels import LogLevel


@runtime_checkable
class SinkPort(Protocol):
    """Destination receiving log entries.

    ``deliver`` may be a plain method or a coroutine function; the fan-out
    awaits whatever it returns. ``release`` is optional and may be missing on
    sinks without resources.

    Examples
    --------
    >>> class Recorder:
    ...     name = "recorder"
    ...     level = LogLevel.INFO
    ...     def __init__(self):
    ...         self.entries = []
    ...     def deliver(self, entry):
    ...         self.entries.append(entry)
    >>> isinstance(Recorder(), SinkPort)
    True
    """

    name: str
    level: LogLevel

    def deliver(self, entry: LogEntry) -> None | Awaitable[None]:
        """Record ``entry`` at the destination."""


def sink_accepts(sink: SinkPort, entry: LogEntry) -> bool:
    """Return ``True`` when ``entry`` meets the sink's minimum severity."""

    level = getattr(sink, "level", None)
    return level is None or entry.level >= level


__all__ = ["SinkPort", "sink_accepts"]
