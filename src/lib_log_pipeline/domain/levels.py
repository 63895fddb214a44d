"""Log level abstraction providing the six pipeline severities.

Purpose
-------
Offer a totally ordered representation of log severities that gates both the
logger and every sink, together with presentation metadata for the console
formatters.

Contents
--------
* :class:`LogLevel` integer enum with conversion helpers and presentation metadata.
* ``_ICON_TABLE`` constant mapping levels to glyphs.

System Role
-----------
Used by the runtime to enforce the logger threshold, by the fan-out use case to
apply per-sink thresholds, and by the adapters to render level names.
"""

from __future__ import annotations

from enum import IntEnum

_ALIASES = {
    "WARNING": "WARN",
    "CRITICAL": "FATAL",
}


class LogLevel(IntEnum):
    """Enumerated logging levels ordered ``TRACE < ... < FATAL``."""

    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4
    FATAL = 5

    @property
    def icon(self) -> str:
        """Return the unicode icon used by the development formatter."""

        return _ICON_TABLE[self]

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        normalized = name.strip().upper()
        normalized = _ALIASES.get(normalized, normalized)
        try:
            return cls[normalized]
        except KeyError as exc:
            raise ValueError(f"Unknown log level: {name!r}") from exc

    @classmethod
    def from_numeric(cls, level: int) -> "LogLevel":
        """Return the :class:`LogLevel` whose ordinal equals ``level``."""
        try:
            return cls(level)
        except ValueError as exc:
            raise ValueError(f"Unsupported log level numeric: {level}") from exc

    @classmethod
    def coerce(cls, level: "str | int | LogLevel") -> "LogLevel":
        """Normalise level inputs (enum, name or ordinal) into :class:`LogLevel`.

        Examples
        --------
        >>> LogLevel.coerce("warning") is LogLevel.WARN
        True
        >>> LogLevel.coerce(4) is LogLevel.ERROR
        True
        """
        if isinstance(level, LogLevel):
            return level
        if isinstance(level, str):
            return cls.from_name(level)
        if isinstance(level, bool) or not isinstance(level, int):
            raise ValueError(f"Unsupported log level: {level!r}")
        return cls.from_numeric(level)


_ICON_TABLE = {
    LogLevel.TRACE: "◦",
    LogLevel.DEBUG: "◉",
    LogLevel.INFO: "ℹ",
    LogLevel.WARN: "⚠",
    LogLevel.ERROR: "✖",
    LogLevel.FATAL: "☠",
}
# Glyphs displayed by the development formatter per log level.


__all__ = ["LogLevel"]
