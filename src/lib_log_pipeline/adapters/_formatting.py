"""Utilities that normalise log entries into JSON-safe payloads.

Why
---
The JSON formatter, the simple file formatter and the network sink all emit
the same JSON line schema. Producing the payload in one place keeps them in
sync and guarantees that formatting never raises: cyclic structures and
objects :mod:`json` cannot encode are replaced with placeholders.

Contents
--------
* :func:`to_jsonable` – recursive conversion with cycle detection.
* :func:`dumps_safe` – ``json.dumps`` over :func:`to_jsonable`.
* :func:`build_entry_payload` – the JSON line schema for one entry.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Set as AbstractSet
from datetime import date, datetime
from enum import Enum
from typing import Any

from lib_log_pipeline.domain.entry import ErrorInfo, LogEntry
from lib_log_pipeline.domain.values import ValueKind

CIRCULAR_PLACEHOLDER = "[Circular]"
UNSERIALIZABLE_PLACEHOLDER = "[Unserializable]"


def to_jsonable(value: Any, _active: frozenset[int] = frozenset()) -> Any:
    """Return a structure :func:`json.dumps` accepts.

    Examples
    --------
    >>> loop = {'name': 'a'}
    >>> loop['self'] = loop
    >>> to_jsonable(loop)
    {'name': 'a', 'self': '[Circular]'}
    >>> to_jsonable((1, {2}))
    [1, [2]]
    """
    kind = ValueKind.of(value)
    if kind is ValueKind.NUMBER and isinstance(value, float) and value != value:
        return None
    if kind.is_scalar:
        return value
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, ErrorInfo):
        return value.to_dict()
    if isinstance(value, BaseException):
        return ErrorInfo.from_exception(value).to_dict()
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")

    marker = id(value)
    if marker in _active:
        return CIRCULAR_PLACEHOLDER
    active = _active | {marker}
    if isinstance(value, Mapping):
        return {str(key): to_jsonable(item, active) for key, item in value.items()}
    if isinstance(value, (list, tuple, AbstractSet)):
        return [to_jsonable(item, active) for item in value]
    try:
        return repr(value)
    except Exception:
        return f"<{type(value).__name__}>"


def dumps_safe(value: Any, **kwargs: Any) -> str:
    """Serialise ``value`` to JSON without ever raising."""

    try:
        return json.dumps(to_jsonable(value), ensure_ascii=False, default=str, **kwargs)
    except (RecursionError, TypeError, ValueError):
        return json.dumps(UNSERIALIZABLE_PLACEHOLDER)


def build_entry_payload(entry: LogEntry) -> dict[str, Any]:
    """Return the JSON line schema for ``entry`` with JSON-safe values.

    Each field is converted on its own; a field that is nested too deeply for
    the interpreter or that :mod:`json` still rejects becomes
    :data:`UNSERIALIZABLE_PLACEHOLDER` while the rest of the entry survives.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> from lib_log_pipeline.domain.levels import LogLevel
    >>> deep: dict = {}
    >>> node = deep
    >>> for _ in range(5000):
    ...     node['next'] = {}
    ...     node = node['next']
    >>> entry = LogEntry(LogLevel.INFO, 'deep', datetime(2025, 9, 30, 12, 0, tzinfo=timezone.utc), context=deep)
    >>> payload = build_entry_payload(entry)
    >>> payload['message'], payload['context']
    ('deep', '[Unserializable]')
    """

    payload: dict[str, Any] = {}
    for key, value in entry.to_dict().items():
        try:
            converted = to_jsonable(value)
            json.dumps(converted, ensure_ascii=False, default=str)
        except (RecursionError, TypeError, ValueError):
            converted = UNSERIALIZABLE_PLACEHOLDER
        payload[key] = converted
    return payload


__all__ = [
    "CIRCULAR_PLACEHOLDER",
    "UNSERIALIZABLE_PLACEHOLDER",
    "build_entry_payload",
    "dumps_safe",
    "to_jsonable",
]
