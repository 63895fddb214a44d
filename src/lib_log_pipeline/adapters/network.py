"""Batching HTTP sink implementing :class:`SinkPort`.

Purpose
-------
Ship entries to a remote collector in batches, either when ``batch_size``
entries are pending or when the flush interval elapses. Transmission happens on
a background thread, so ``deliver`` never waits for the network.

Contents
--------
* :class:`NetworkSink` – the sink, its buffer and its flush thread.

System Role
-----------
Optional remote destination. Transmission failures never reach the caller:
the batch goes back to the front of the buffer and is retried on the next
trigger. There is no backoff and no retry limit, so an unreachable collector
makes the buffer grow without bound.

Alignment Notes
---------------
Wire contract: ``POST <url>`` with ``Content-Type: application/json`` and the
body ``{"logs": [...]}`` where each item follows the JSON line schema.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import Any, Deque, Mapping

import requests

from lib_log_pipeline.application.ports.sink import SinkPort
from lib_log_pipeline.application.use_cases._diagnostics import DiagnosticHook, build_diagnostic_emitter
from lib_log_pipeline.domain.entry import LogEntry
from lib_log_pipeline.domain.levels import LogLevel

from ._formatting import build_entry_payload, dumps_safe

LOGGER = logging.getLogger(__name__)


class NetworkSink(SinkPort):
    """Buffer entries and POST them as JSON batches from a background thread.

    Parameters
    ----------
    url:
        Collector endpoint receiving the batches.
    headers:
        Extra request headers merged over ``Content-Type: application/json``.
    batch_size:
        Pending entry count that wakes the flush thread.
    flush_interval:
        Seconds between timer-driven flushes.
    timeout:
        ``requests`` timeout for one transmission.
    session:
        Optional :class:`requests.Session` (or compatible object with ``post``).
    diagnostic:
        Optional hook receiving ``network_flush_failed`` with the URL, the
        number of requeued entries and the error text.
    """

    def __init__(
        self,
        url: str,
        *,
        level: LogLevel | str = LogLevel.INFO,
        headers: Mapping[str, str] | None = None,
        batch_size: int = 10,
        flush_interval: float = 5.0,
        timeout: float | None = 10.0,
        session: requests.Session | None = None,
        diagnostic: DiagnosticHook = None,
        name: str = "http",
    ) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if flush_interval <= 0:
            raise ValueError("flush_interval must be positive")
        self.name = name
        self.level = LogLevel.coerce(level)
        self._url = url
        self._headers = {"Content-Type": "application/json", **(headers or {})}
        self._batch_size = batch_size
        self._flush_interval = flush_interval
        self._timeout = timeout
        self._session = session if session is not None else requests.Session()
        self._owns_session = session is None
        self._buffer: Deque[LogEntry] = deque()
        self._buffer_lock = threading.Lock()
        self._flush_lock = threading.Lock()
        self._wake = threading.Event()
        self._idle = threading.Event()
        self._idle.set()
        self._stop_event = threading.Event()
        self._emit = build_diagnostic_emitter(diagnostic)
        self._thread = threading.Thread(target=self._run, name=f"{name}-flush", daemon=True)
        self._thread.start()

    @property
    def pending(self) -> list[LogEntry]:
        """Snapshot of the entries waiting for transmission."""

        with self._buffer_lock:
            return list(self._buffer)

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._headers)

    def deliver(self, entry: LogEntry) -> None:
        """Queue ``entry`` and wake the flush thread when the batch is full."""
        if entry.level < self.level:
            return
        with self._buffer_lock:
            self._buffer.append(entry)
            if len(self._buffer) >= self._batch_size and not self._stop_event.is_set():
                self._idle.clear()
                self._wake.set()

    def wait_until_idle(self, timeout: float | None = None) -> bool:
        """Block until the flush woken by a full batch has finished.

        Returns ``False`` when ``timeout`` elapsed first.
        """

        return self._idle.wait(timeout)

    def flush(self) -> bool:
        """Transmit every pending entry as one batch on the calling thread.

        Returns ``True`` when the batch was accepted (or nothing was pending)
        and ``False`` when the entries were put back for a later retry.
        """
        with self._flush_lock:
            with self._buffer_lock:
                batch = list(self._buffer)
                self._buffer.clear()
            if not batch:
                return True
            try:
                response = self._session.post(
                    self._url,
                    data=self._encode(batch).encode("utf-8"),
                    headers=self._headers,
                    timeout=self._timeout,
                )
            except requests.RequestException as exc:
                LOGGER.error("HTTP sink error: %s", exc)
                self._requeue(batch, repr(exc))
                return False
            except Exception as exc:
                LOGGER.error("HTTP sink flush raised an exception; batch kept", exc_info=exc)
                self._requeue(batch, repr(exc))
                return False
            if not 200 <= response.status_code < 300:
                LOGGER.error("HTTP sink failed: %s %s", response.status_code, response.reason)
                self._requeue(batch, f"HTTP {response.status_code}")
                return False
            return True

    def release(self) -> None:
        """Stop the flush thread and attempt one final flush."""
        with self._buffer_lock:
            self._stop_event.set()
            self._wake.set()
        join_timeout = None if self._timeout is None else self._timeout + 1.0
        self._thread.join(join_timeout)
        self.flush()
        self._idle.set()
        if self._owns_session:
            self._session.close()

    def _requeue(self, batch: list[LogEntry], reason: str) -> None:
        with self._buffer_lock:
            self._buffer.extendleft(reversed(batch))
        self._emit("network_flush_failed", {"url": self._url, "entries": len(batch), "error": reason})

    def _encode(self, batch: list[LogEntry]) -> str:
        payload: dict[str, Any] = {"logs": [build_entry_payload(entry) for entry in batch]}
        return dumps_safe(payload)

    def _run(self) -> None:
        """Flush on wake-up or every ``flush_interval`` until released."""
        while True:
            self._wake.wait(self._flush_interval)
            if self._stop_event.is_set():
                break
            self._wake.clear()
            try:
                with self._buffer_lock:
                    has_pending = bool(self._buffer)
                if has_pending:
                    self.flush()
            except Exception:
                LOGGER.exception("HTTP sink background flush failed")
            finally:
                with self._buffer_lock:
                    if not self._wake.is_set():
                        self._idle.set()


__all__ = ["NetworkSink"]
