"""Ready-made middleware for :meth:`Logger.use`.

Purpose
-------
Cover the enrichment and redaction steps most services register: request
correlation, epoch timestamps, secret masking and call-site capture.

Contents
--------
* :func:`request_id` – stamp ``meta["request_id"]`` from a provider.
* :func:`timestamp_ms` – stamp ``meta["timestamp_ms"]`` from a clock.
* :func:`sanitize` – redact sensitive context keys recursively.
* :func:`caller` – record the call site in ``meta["caller"]``.
* :func:`resolve_caller` – default frame-walking resolver used by :func:`caller`.

System Role
-----------
Each factory returns a plain callable matching the middleware contract: it
receives the entry and a continuation and calls the continuation exactly once.
"""

from __future__ import annotations

import sys
import time
from collections.abc import Mapping, Sequence, Set as AbstractSet
from typing import Any, Callable, Iterable, Optional

from lib_log_pipeline.application.ports import Middleware, Proceed
from lib_log_pipeline.domain import LogEntry

DEFAULT_SENSITIVE_FIELDS: tuple[str, ...] = ("password", "token", "secret")
REDACTED = "[REDACTED]"

CallerResolver = Callable[[], Optional[dict[str, Any]]]

_PACKAGE_PREFIX = "lib_log_pipeline"


def request_id(provider: Callable[[], str]) -> Middleware:
    """Attach ``provider()`` as ``meta["request_id"]``.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> from lib_log_pipeline.domain import LogLevel
    >>> entry = LogEntry(LogLevel.INFO, 'msg', datetime(2025, 9, 30, tzinfo=timezone.utc))
    >>> request_id(lambda: 'req-1')(entry, lambda: None)
    >>> entry.meta['request_id']
    'req-1'
    """

    def middleware(entry: LogEntry, proceed: Proceed) -> None:
        entry.meta["request_id"] = provider()
        proceed()

    return middleware


def timestamp_ms(clock: Callable[[], float] = time.time) -> Middleware:
    """Attach the epoch time in whole milliseconds as ``meta["timestamp_ms"]``."""

    def middleware(entry: LogEntry, proceed: Proceed) -> None:
        entry.meta["timestamp_ms"] = int(clock() * 1000)
        proceed()

    return middleware


def sanitize(fields: Iterable[str] = DEFAULT_SENSITIVE_FIELDS, *, replacement: str = REDACTED) -> Middleware:
    """Replace context values whose key contains one of ``fields``.

    Matching is a case-insensitive substring test on the key, applied at every
    nesting level. The caller's mapping is never mutated; the entry receives a
    redacted copy.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> from lib_log_pipeline.domain import LogLevel
    >>> context = {'user': 'ada', 'auth': {'apiToken': 't-1'}, 'Password': 'p'}
    >>> entry = LogEntry(LogLevel.INFO, 'login', datetime(2025, 9, 30, tzinfo=timezone.utc), context=context)
    >>> sanitize()(entry, lambda: None)
    >>> entry.context
    {'user': 'ada', 'auth': {'apiToken': '[REDACTED]'}, 'Password': '[REDACTED]'}
    >>> context['Password']
    'p'
    """

    needles = tuple(field.lower() for field in fields)

    def is_sensitive(key: Any) -> bool:
        lowered = str(key).lower()
        return any(needle in lowered for needle in needles)

    def scrub(value: Any, active: frozenset[int]) -> Any:
        if isinstance(value, (str, bytes, bytearray)):
            return value
        marker = id(value)
        if marker in active:
            return value
        if isinstance(value, Mapping):
            nested = active | {marker}
            return {key: replacement if is_sensitive(key) else scrub(item, nested) for key, item in value.items()}
        if isinstance(value, AbstractSet):
            return value
        if isinstance(value, Sequence):
            nested = active | {marker}
            converted = [scrub(item, nested) for item in value]
            return tuple(converted) if isinstance(value, tuple) else converted
        return value

    def middleware(entry: LogEntry, proceed: Proceed) -> None:
        if entry.context is not None:
            entry.context = scrub(entry.context, frozenset())
        proceed()

    return middleware


def resolve_caller() -> dict[str, Any] | None:
    """Return ``{function, file, line}`` of the first frame outside this package."""

    frame = sys._getframe(1)
    while frame is not None:
        module = frame.f_globals.get("__name__", "")
        if module != _PACKAGE_PREFIX and not module.startswith(f"{_PACKAGE_PREFIX}."):
            code = frame.f_code
            return {"function": code.co_name, "file": code.co_filename, "line": frame.f_lineno}
        frame = frame.f_back
    return None


def caller(resolver: CallerResolver | None = None) -> Middleware:
    """Store the call site in ``meta["caller"]`` when the resolver finds one."""

    resolve = resolver or resolve_caller

    def middleware(entry: LogEntry, proceed: Proceed) -> None:
        info = resolve()
        if info is not None:
            entry.meta["caller"] = info
        proceed()

    return middleware


__all__ = [
    "DEFAULT_SENSITIVE_FIELDS",
    "REDACTED",
    "CallerResolver",
    "caller",
    "request_id",
    "resolve_caller",
    "sanitize",
    "timestamp_ms",
]
