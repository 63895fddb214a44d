"""Rich-powered console sink implementing :class:`SinkPort`.

Purpose
-------
Primary human-facing destination. Renders entries through Rich so colours can
be applied per level (and per segment for the console layout) while honouring
``no_color`` terminals.

Contents
--------
* :data:`_STYLE_MAP` – default level-to-style mapping.
* :data:`_SEGMENT_STYLES` – styles for the console layout segments.
* :class:`RichConsoleSink` – the sink.

System Role
-----------
Selected by the development profile (coloured text) and the production
profile (JSON lines). Entries at ``ERROR`` and above go to the error console.
"""

from __future__ import annotations

from typing import Mapping, MutableMapping

from rich.console import Console
from rich.text import Text

from lib_log_pipeline.application.ports.formatter import FormatterPort
from lib_log_pipeline.application.ports.sink import SinkPort
from lib_log_pipeline.domain.entry import LogEntry
from lib_log_pipeline.domain.levels import LogLevel

from ..formatters import ConsoleFormatter, select_formatter


_STYLE_MAP: Mapping[LogLevel, str] = {
    LogLevel.TRACE: "bright_black",
    LogLevel.DEBUG: "blue",
    LogLevel.INFO: "green",
    LogLevel.WARN: "yellow",
    LogLevel.ERROR: "red",
    LogLevel.FATAL: "bold white on red",
}

#: Default Rich styles keyed by :class:`LogLevel` severity.

_SEGMENT_STYLES: Mapping[str, str] = {
    "timestamp": "dim",
    "message": "",
    "context": "cyan",
    "error": "red",
    "meta": "magenta",
}


class RichConsoleSink(SinkPort):
    """Render entries to the terminal using Rich.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> from io import StringIO
    >>> entry = LogEntry(LogLevel.INFO, 'msg', datetime(2025, 9, 30, 12, 0, tzinfo=timezone.utc))
    >>> console = Console(file=StringIO(), record=True)
    >>> sink = RichConsoleSink(console=console, colors=False)
    >>> sink.deliver(entry)
    >>> 'msg' in console.export_text()
    True
    """

    def __init__(
        self,
        *,
        level: LogLevel | str = LogLevel.INFO,
        json: bool = False,
        colors: bool = True,
        timestamp: bool = True,
        formatter: FormatterPort | None = None,
        console: Console | None = None,
        error_console: Console | None = None,
        styles: MutableMapping[LogLevel | str, str] | None = None,
        name: str = "console",
    ) -> None:
        """Configure the sink with formatter, colour and style overrides."""
        self.name = name
        self.level = LogLevel.coerce(level)
        self._formatter = formatter or select_formatter(json=json, fallback=ConsoleFormatter(timestamp=timestamp))
        self._colors = colors and not json
        self._console = console if console is not None else Console(soft_wrap=True)
        if error_console is not None:
            self._error_console = error_console
        elif console is not None:
            self._error_console = console
        else:
            self._error_console = Console(stderr=True, soft_wrap=True)
        if styles:
            merged = dict(_STYLE_MAP)
            for key, value in styles.items():
                merged[LogLevel.coerce(key)] = value
            self._style_map = merged
        else:
            self._style_map = dict(_STYLE_MAP)

    def deliver(self, entry: LogEntry) -> None:
        """Print ``entry`` to stdout, or stderr for ``ERROR`` and above."""
        if entry.level < self.level:
            return
        target = self._error_console if entry.level >= LogLevel.ERROR else self._console
        target.print(self._render(entry), markup=False, highlight=False, soft_wrap=True)

    def _render(self, entry: LogEntry) -> Text:
        if not self._colors:
            return Text(self._formatter.format(entry))
        level_style = self._style_map.get(entry.level, "")
        segments = getattr(self._formatter, "segments", None)
        if segments is None:
            return Text(self._formatter.format(entry), style=level_style)
        text = Text()
        for index, (fragment, key) in enumerate(segments(entry)):
            if index:
                text.append(" ")
            style = level_style if key is None else _SEGMENT_STYLES.get(key, "")
            text.append(fragment, style=style)
        return text


__all__ = ["RichConsoleSink"]
