"""Core logger: level gate, middleware chain and fan-out to sinks.

Purpose
-------
Expose the object application code logs through. Every call builds a
:class:`LogEntry`, checks the silent flag and the level threshold, threads the
entry through the middleware chain and fans it out to the registered sinks.
Nothing raised by middleware or sinks reaches the caller.

Contents
--------
* :class:`LoggerConfig` – immutable configuration snapshot used by the registry.
* :class:`Logger` – the pipeline, child derivation, timers and lifecycle.

System Role
-----------
Composition point between the application use cases
(:mod:`lib_log_pipeline.application.use_cases`) and the adapters. Sinks may be
synchronous or return awaitables: without a running event loop the awaitables
are driven to completion before ``log`` returns; inside a running loop they
are scheduled as a task that :meth:`Logger.close_async` waits for.
"""

from __future__ import annotations

import asyncio
import sys
import threading
import time
from collections.abc import Coroutine, Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from lib_log_pipeline.application.ports import ClockPort, Middleware, SinkPort, SystemClock
from lib_log_pipeline.application.use_cases import (
    DiagnosticHook,
    build_diagnostic_emitter,
    build_fan_out,
    create_shutdown,
    run_middleware_chain,
)
from lib_log_pipeline.application.use_cases._diagnostics import report_failure
from lib_log_pipeline.domain import ErrorInfo, LogEntry, LogLevel, format_timestamp

Context = Mapping[str, Any]


@dataclass(frozen=True)
class LoggerConfig:
    """Immutable construction-time configuration for a :class:`Logger`.

    Attributes
    ----------
    level:
        Minimum severity passed to the sinks.
    sinks:
        Destinations receiving every entry that clears the gates.
    default_meta:
        Metadata copied into every entry's ``meta``.
    exit_on_error:
        Terminate the process after a ``fatal`` entry has been dispatched.
    silent:
        Suppress all dispatch without touching ``level``.
    """

    level: LogLevel = LogLevel.INFO
    sinks: tuple[SinkPort, ...] = ()
    default_meta: Mapping[str, Any] = field(default_factory=dict)
    exit_on_error: bool = False
    silent: bool = False

    def merged(self, **overrides: Any) -> "LoggerConfig":
        """Return a copy with ``overrides`` applied; ``default_meta`` maps are merged.

        Examples
        --------
        >>> base = LoggerConfig(default_meta={'service': 'api', 'region': 'eu'})
        >>> merged = base.merged(level='debug', default_meta={'region': 'us'})
        >>> merged.level is LogLevel.DEBUG, dict(merged.default_meta)
        (True, {'service': 'api', 'region': 'us'})
        """
        meta = {**self.default_meta, **(overrides.pop("default_meta", None) or {})}
        if "level" in overrides:
            overrides["level"] = LogLevel.coerce(overrides["level"])
        if "sinks" in overrides:
            overrides["sinks"] = tuple(overrides["sinks"] or ())
        return replace(self, default_meta=meta, **overrides)


class Logger:
    """Structured logger dispatching entries to independent sinks.

    Examples
    --------
    >>> from lib_log_pipeline.adapters.memory import MemorySink
    >>> memory = MemorySink()
    >>> logger = Logger(level=LogLevel.INFO, sinks=[memory], default_meta={'service': 'api'})
    >>> logger.trace('hidden')
    >>> logger.info('ready', {'port': 8080})
    >>> [(entry.message, entry.meta['service']) for entry in memory.get_entries()]
    [('ready', 'api')]
    """

    def __init__(
        self,
        *,
        level: LogLevel | str | int = LogLevel.INFO,
        sinks: Iterable[SinkPort] | None = None,
        default_meta: Mapping[str, Any] | None = None,
        exit_on_error: bool = False,
        silent: bool = False,
        middleware: Iterable[Middleware] | None = None,
        clock: ClockPort | None = None,
        diagnostic: DiagnosticHook = None,
    ) -> None:
        self._level = LogLevel.coerce(level)
        self._sinks: list[SinkPort] = list(sinks or ())
        self._default_meta: dict[str, Any] = dict(default_meta or {})
        self._exit_on_error = exit_on_error
        self._silent = silent
        self._middleware: list[Middleware] = list(middleware or ())
        self._clock: ClockPort = clock or SystemClock()
        self._diagnostic = diagnostic
        self._emit = build_diagnostic_emitter(diagnostic)
        self._fan_out = build_fan_out(self._emit)
        self._shutdown = create_shutdown(emit=self._emit)
        self._lock = threading.RLock()
        self._in_flight: set[asyncio.Task[None]] = set()
        self._timers: dict[str, float] = {}
        self._profiles: dict[str, tuple[float, str]] = {}

    @classmethod
    def from_config(
        cls,
        config: LoggerConfig,
        *,
        middleware: Iterable[Middleware] | None = None,
        clock: ClockPort | None = None,
        diagnostic: DiagnosticHook = None,
    ) -> "Logger":
        """Build a logger from a :class:`LoggerConfig` snapshot."""

        return cls(
            level=config.level,
            sinks=config.sinks,
            default_meta=config.default_meta,
            exit_on_error=config.exit_on_error,
            silent=config.silent,
            middleware=middleware,
            clock=clock,
            diagnostic=diagnostic,
        )

    # ------------------------------------------------------------------ logging

    def trace(self, message: str, context: Context | None = None) -> None:
        self.log(LogLevel.TRACE, message, context)

    def debug(self, message: str, context: Context | None = None) -> None:
        self.log(LogLevel.DEBUG, message, context)

    def info(self, message: str, context: Context | None = None) -> None:
        self.log(LogLevel.INFO, message, context)

    def warn(self, message: str, context: Context | None = None) -> None:
        self.log(LogLevel.WARN, message, context)

    def error(
        self,
        message: str,
        error: BaseException | ErrorInfo | None = None,
        context: Context | None = None,
    ) -> None:
        self.log(LogLevel.ERROR, message, context, error)

    def fatal(
        self,
        message: str,
        error: BaseException | ErrorInfo | None = None,
        context: Context | None = None,
    ) -> None:
        """Log at ``FATAL`` and, with ``exit_on_error``, exit with status 1.

        The exit happens once the fan-out has settled. Inside a running event
        loop the exit is deferred until the scheduled dispatch task completes.
        """
        task = self._log(LogLevel.FATAL, message, context, error)
        if not self._exit_on_error:
            return
        if task is None:
            self._terminate()
        else:
            task.add_done_callback(lambda _task: self._terminate())

    def log(
        self,
        level: LogLevel | str | int,
        message: str,
        context: Context | None = None,
        error: BaseException | ErrorInfo | None = None,
    ) -> None:
        """Create an entry and dispatch it; never raises."""
        self._log(level, message, context, error)

    def _log(
        self,
        level: LogLevel | str | int,
        message: str,
        context: Context | None,
        error: BaseException | ErrorInfo | None,
    ) -> asyncio.Task[None] | None:
        try:
            resolved = LogLevel.coerce(level)
            if self._silent or resolved < self._level:
                return None
            entry = LogEntry(
                level=resolved,
                message=str(message),
                timestamp=self._clock.now(),
                context=context,
                error=_capture_error(error),
                meta=dict(self._default_meta),
            )
            with self._lock:
                middleware = tuple(self._middleware)
            _, pending = run_middleware_chain(entry, middleware, self._dispatch, emit=self._emit)
            if pending is None:
                return None
            return self._settle(pending)
        except Exception as exc:
            report_failure("log_failed", str(message), exc, self._emit)
            return None

    def _dispatch(self, entry: LogEntry) -> Coroutine[Any, Any, None] | None:
        return self._fan_out(entry, self.get_sinks())

    def _settle(self, pending: Coroutine[Any, Any, None]) -> asyncio.Task[None] | None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(pending)
            return None
        task = loop.create_task(pending)
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return task

    @staticmethod
    def _terminate() -> None:
        sys.exit(1)

    # ------------------------------------------------------------ configuration

    def child(self, meta: Mapping[str, Any]) -> "Logger":
        """Derive a logger with ``meta`` merged over the default metadata.

        The child gets a snapshot of the sink list (the sink objects themselves
        are shared) and a copy of the middleware list; level and silent flag are
        independent afterwards.
        """
        with self._lock:
            middleware = list(self._middleware)
        return Logger(
            level=self._level,
            sinks=self.get_sinks(),
            default_meta={**self._default_meta, **meta},
            exit_on_error=self._exit_on_error,
            silent=self._silent,
            middleware=middleware,
            clock=self._clock,
            diagnostic=self._diagnostic,
        )

    def use(self, middleware: Middleware) -> None:
        """Append ``middleware``; registering it twice runs it twice."""
        with self._lock:
            self._middleware.append(middleware)

    def set_level(self, level: LogLevel | str | int) -> None:
        self._level = LogLevel.coerce(level)

    def get_level(self) -> LogLevel:
        return self._level

    def set_silent(self, silent: bool) -> None:
        self._silent = silent

    def is_silent(self) -> bool:
        return self._silent

    @property
    def default_meta(self) -> dict[str, Any]:
        """Live default metadata; changes affect entries created afterwards only."""

        return self._default_meta

    def add_sink(self, sink: SinkPort) -> None:
        with self._lock:
            self._sinks.append(sink)

    def remove_sink(self, name: str) -> None:
        """Remove every sink called ``name``."""
        with self._lock:
            self._sinks = [sink for sink in self._sinks if sink.name != name]

    def get_sinks(self) -> list[SinkPort]:
        """Return a copy of the sink list."""
        with self._lock:
            return list(self._sinks)

    # -------------------------------------------------------------- performance

    def time(self, label: str) -> None:
        """Start a timer measured by :meth:`time_end`."""
        self._timers[label] = time.monotonic()

    def time_end(self, label: str) -> None:
        started = self._timers.pop(label, None)
        if started is None:
            self.warn(f"Timer '{label}' was not started")
            return
        duration = _elapsed_ms(started)
        self.info(f"{label}: {duration}ms", {"performance": {"label": label, "duration": duration}})

    def profile(self, label: str) -> None:
        """Start a profile; logs a ``DEBUG`` marker."""
        self._profiles[label] = (time.monotonic(), format_timestamp(self._clock.now()))
        self.debug(f"Profile started: {label}")

    def profile_end(self, label: str) -> None:
        started = self._profiles.pop(label, None)
        if started is None:
            self.warn(f"Profile '{label}' was not started")
            return
        monotonic_start, start_time = started
        duration = _elapsed_ms(monotonic_start)
        self.info(
            f"Profile completed: {label}",
            {
                "profile": {
                    "label": label,
                    "duration": duration,
                    "start_time": start_time,
                    "end_time": format_timestamp(self._clock.now()),
                }
            },
        )

    def get_stats(self) -> dict[str, Any]:
        """Return level name, sink names and active timer / profile labels."""
        return {
            "level": self._level.name,
            "sinks": [sink.name for sink in self.get_sinks()],
            "active_timers": list(self._timers),
            "active_profiles": list(self._profiles),
        }

    # ---------------------------------------------------------------- lifecycle

    async def close_async(self) -> None:
        """Wait for in-flight deliveries, then release every sink."""
        await self._shutdown(self.get_sinks(), tuple(self._in_flight))

    def close(self) -> None:
        """Synchronous variant of :meth:`close_async`.

        Raises :class:`RuntimeError` inside a running event loop; await
        :meth:`close_async` there instead.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self.close_async())
            return
        raise RuntimeError("Logger.close() cannot run inside an active event loop; await Logger.close_async() instead")


def _capture_error(error: BaseException | ErrorInfo | None) -> ErrorInfo | None:
    if error is None or isinstance(error, ErrorInfo):
        return error
    return ErrorInfo.from_exception(error)


def _elapsed_ms(started: float) -> int:
    return round((time.monotonic() - started) * 1000)


__all__ = ["Logger", "LoggerConfig"]
