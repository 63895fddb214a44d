"""Fan-out use case delivering one entry to every registered sink.

Purpose
-------
Apply the per-sink level gate and isolate failures so one misbehaving sink
never prevents its siblings from receiving the entry.

Contents
--------
* :func:`build_fan_out` – factory returning the dispatch callable.

System Role
-----------
Terminal step of the middleware chain. Synchronous sinks are delivered inline;
awaitables returned by asynchronous sinks are collected into one coroutine the
runtime awaits (or schedules) until every delivery has settled.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable, Coroutine, Sequence
from typing import Any

from lib_log_pipeline.application.ports.sink import SinkPort, sink_accepts
from lib_log_pipeline.domain.entry import LogEntry

from ._diagnostics import Emit, report_failure

FanOutCallable = Callable[[LogEntry, Sequence[SinkPort]], Coroutine[Any, Any, None] | None]


def build_fan_out(emit: Emit) -> FanOutCallable:
    """Return the dispatch callable bound to the diagnostic emitter.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> from lib_log_pipeline.domain.levels import LogLevel
    >>> class Recorder:
    ...     def __init__(self, name, level):
    ...         self.name, self.level, self.entries = name, level, []
    ...     def deliver(self, entry):
    ...         self.entries.append(entry.message)
    >>> info, error = Recorder('info', LogLevel.INFO), Recorder('error', LogLevel.ERROR)
    >>> fan_out = build_fan_out(lambda *_: None)
    >>> fan_out(LogEntry(LogLevel.WARN, 'careful', datetime(2025, 9, 30, tzinfo=timezone.utc)), [info, error]) is None
    True
    >>> info.entries, error.entries
    (['careful'], [])
    """

    def fan_out(entry: LogEntry, sinks: Sequence[SinkPort]) -> Coroutine[Any, Any, None] | None:
        pending: list[Coroutine[Any, Any, None]] = []
        for sink in sinks:
            if not sink_accepts(sink, entry):
                continue
            try:
                outcome = sink.deliver(entry)
            except Exception as exc:
                report_failure("sink_failed", _sink_name(sink), exc, emit)
                continue
            if inspect.isawaitable(outcome):
                pending.append(_settle(sink, outcome, emit))
        if not pending:
            return None
        return _gather(pending)

    return fan_out


async def _settle(sink: SinkPort, outcome: Awaitable[Any], emit: Emit) -> None:
    try:
        await outcome
    except Exception as exc:
        report_failure("sink_failed", _sink_name(sink), exc, emit)


async def _gather(pending: list[Coroutine[Any, Any, None]]) -> None:
    await asyncio.gather(*pending)


def _sink_name(sink: SinkPort) -> str:
    return str(getattr(sink, "name", type(sink).__name__))


__all__ = ["FanOutCallable", "build_fan_out"]
