"""Runtime surface: loggers, registry, profiles and built-in middleware.

Purpose
-------
Expose the objects host applications construct directly instead of importing
the inner layers: :class:`Logger`, :class:`LoggerRegistry` and the middleware
factories.

Contents
--------
* :class:`Logger` / :class:`LoggerConfig` – the pipeline and its configuration.
* :class:`LoggerRegistry` / :func:`create_logger` – named loggers and profiles.
* :mod:`middleware` – request id, timestamp, sanitize and caller middleware.
* :func:`summary_info` – metadata banner shared by the CLI.

System Role
-----------
Outer shell of the architecture. There is no process-wide logger state; each
registry owns its loggers and is passed around explicitly.
"""

from __future__ import annotations

from . import middleware
from .logger import Logger, LoggerConfig
from .registry import LoggerRegistry, create_logger


def summary_info() -> str:
    """Return the metadata banner used by the CLI entry point.

    Outputs
    -------
    str
        Multi-line banner ending with a newline.
    """

    from .. import __init__conf__

    lines: list[str] = []
    __init__conf__.print_info(writer=lines.append)
    return "".join(lines)


__all__ = [
    "Logger",
    "LoggerConfig",
    "LoggerRegistry",
    "create_logger",
    "middleware",
    "summary_info",
]
