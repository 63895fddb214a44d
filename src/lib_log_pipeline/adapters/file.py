"""Size-rotating file sink implementing :class:`SinkPort`.

Purpose
-------
Append formatted entries to a log file and bound disk usage by rotating the
active file into numbered siblings once it would grow past ``max_size`` bytes.

Contents
--------
* :class:`RotatingFileSink` – the sink and its rotation algorithm.

System Role
-----------
Durable destination of the production profile. The accumulated size of the
active file is tracked in memory; it is read from disk once, at construction.
A crash mid-rotation can make that counter drift from the real file size.

Alignment Notes
---------------
``<file>.1`` is always the most recent rotation. With ``max_files=N`` the
oldest kept file is ``<file>.(N-1)``; ``<file>.(N-1)`` is deleted before the
shift so the set never grows.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from lib_log_pipeline.application.ports.formatter import FormatterPort
from lib_log_pipeline.application.ports.sink import SinkPort
from lib_log_pipeline.domain.entry import LogEntry
from lib_log_pipeline.domain.levels import LogLevel

from .formatters import SimpleFormatter, select_formatter

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 10 * 1024 * 1024
DEFAULT_MAX_FILES = 5


class RotatingFileSink(SinkPort):
    """Append entries to ``filename`` and rotate it by size.

    Examples
    --------
    >>> import tempfile
    >>> from datetime import datetime, timezone
    >>> target = Path(tempfile.mkdtemp()) / 'app.log'
    >>> sink = RotatingFileSink(target, max_size=120)
    >>> entry = LogEntry(LogLevel.INFO, 'x' * 40, datetime(2025, 9, 30, tzinfo=timezone.utc))
    >>> for _ in range(3):
    ...     sink.deliver(entry)
    >>> target.with_name('app.log.1').exists()
    True
    >>> sink.current_size <= 120
    True
    """

    def __init__(
        self,
        filename: str | os.PathLike[str],
        *,
        level: LogLevel | str = LogLevel.INFO,
        json: bool = False,
        max_size: int = DEFAULT_MAX_SIZE,
        max_files: int = DEFAULT_MAX_FILES,
        formatter: FormatterPort | None = None,
        encoding: str = "utf-8",
        name: str = "file",
    ) -> None:
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        if max_files <= 0:
            raise ValueError("max_files must be positive")
        self.name = name
        self.level = LogLevel.coerce(level)
        self._path = Path(filename)
        self._max_size = max_size
        self._max_files = max_files
        self._encoding = encoding
        self._formatter = formatter or select_formatter(json=json, fallback=SimpleFormatter())
        self._current_size = self._path.stat().st_size if self._path.is_file() else 0

    @property
    def path(self) -> Path:
        return self._path

    @property
    def current_size(self) -> int:
        """Bytes written to the active file as tracked by the sink."""

        return self._current_size

    def deliver(self, entry: LogEntry) -> None:
        """Format ``entry``, rotate when needed, then append it."""
        if entry.level < self.level:
            return
        content = f"{self._formatter.format(entry)}\n"
        size = len(content.encode(self._encoding))
        if self._current_size > 0 and self._current_size + size > self._max_size:
            self.rotate()
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding=self._encoding, newline="") as fh:
                fh.write(content)
        except OSError as exc:
            LOGGER.error("Failed to write log to file %s: %s", self._path, exc)
            return
        self._current_size += size

    def rotate(self) -> None:
        """Shift ``<file>.i`` to ``<file>.(i+1)`` and move the active file to ``<file>.1``."""
        try:
            for index in range(self._max_files - 1, 0, -1):
                older = self._sibling(index)
                if not older.exists():
                    continue
                if index == self._max_files - 1:
                    older.unlink()
                else:
                    older.replace(self._sibling(index + 1))
            if self._path.exists():
                self._path.replace(self._sibling(1))
        except OSError as exc:
            LOGGER.error("Failed to rotate log file %s: %s", self._path, exc)
            return
        self._current_size = 0

    def release(self) -> None:
        """Nothing to release; every write opens and closes the file."""

    def _sibling(self, index: int) -> Path:
        return self._path.with_name(f"{self._path.name}.{index}")


__all__ = ["DEFAULT_MAX_FILES", "DEFAULT_MAX_SIZE", "RotatingFileSink"]
