"""Shutdown orchestration releasing every sink.

Purpose
-------
Provide a unified shutdown routine that waits for in-flight deliveries and
then releases each sink, isolating release failures per sink.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Awaitable, Callable, Iterable, Sequence

from lib_log_pipeline.application.ports.sink import SinkPort

from ._diagnostics import Emit, report_failure


def create_shutdown(
    *,
    emit: Emit,
) -> Callable[[Sequence[SinkPort], Iterable[Awaitable[None]]], Awaitable[None]]:
    """Return an async callable performing the shutdown sequence."""

    async def shutdown(sinks: Sequence[SinkPort], in_flight: Iterable[Awaitable[None]] = ()) -> None:
        """Await in-flight deliveries, then release every sink."""
        waiting = list(in_flight)
        if waiting:
            await asyncio.gather(*waiting, return_exceptions=True)
        await asyncio.gather(*(_release(sink, emit) for sink in sinks))

    return shutdown


async def _release(sink: SinkPort, emit: Emit) -> None:
    release = getattr(sink, "release", None)
    if release is None:
        return
    try:
        outcome = release()
        if inspect.isawaitable(outcome):
            await outcome
    except Exception as exc:
        report_failure("sink_release_failed", str(getattr(sink, "name", type(sink).__name__)), exc, emit)


__all__ = ["create_shutdown"]
