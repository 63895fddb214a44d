"""Use case threading a single entry through the middleware chain.

Purpose
-------
Run the registered middleware strictly in registration order, each at most
once per entry, and hand the entry to the terminal step (the fan-out) only
when every middleware called its continuation.

Contents
--------
* :func:`run_middleware_chain` – the chain runner.

System Role
-----------
Application-layer step invoked by :class:`lib_log_pipeline.runtime.Logger`
between entry creation and dispatch.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TypeVar

from lib_log_pipeline.application.ports.middleware import Middleware, Proceed
from lib_log_pipeline.domain.entry import LogEntry

from ._diagnostics import Emit, report_failure

T = TypeVar("T")


def run_middleware_chain(
    entry: LogEntry,
    middleware: Sequence[Middleware],
    terminal: Callable[[LogEntry], T],
    *,
    emit: Emit,
) -> tuple[bool, T | None]:
    """Execute ``middleware`` over ``entry`` and finish with ``terminal``.

    Each continuation is bound to its position in the chain and fires at most
    once, so a middleware calling ``proceed`` twice cannot run its successors
    (or the terminal step) a second time. A middleware that never calls
    ``proceed`` ends the chain and the entry is dropped. A middleware raising an
    exception is reported; the entry is dropped unless the terminal step had
    already run further down the chain.

    Returns
    -------
    tuple[bool, T | None]
        ``(True, result)`` when ``terminal`` ran, ``(False, None)`` otherwise.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> from lib_log_pipeline.domain.levels import LogLevel
    >>> entry = LogEntry(LogLevel.INFO, 'msg', datetime(2025, 9, 30, tzinfo=timezone.utc))
    >>> def tag(name):
    ...     def middleware(e, proceed):
    ...         e.meta.setdefault('tags', []).append(name)
    ...         proceed()
    ...     return middleware
    >>> run_middleware_chain(entry, [tag('a'), tag('b')], lambda e: 'sent', emit=lambda *_: None)
    (True, 'sent')
    >>> entry.meta['tags']
    ['a', 'b']
    """

    chain = tuple(middleware)
    outcome: list[T] = []

    def step(position: int) -> Proceed:
        fired = False

        def proceed() -> None:
            nonlocal fired
            if fired:
                return
            fired = True
            if position < len(chain):
                chain[position](entry, step(position + 1))
            else:
                outcome.append(terminal(entry))

        return proceed

    try:
        step(0)()
    except Exception as exc:
        report_failure("middleware_failed", entry.message, exc, emit)
    if not outcome:
        return False, None
    return True, outcome[0]


__all__ = ["run_middleware_chain"]
