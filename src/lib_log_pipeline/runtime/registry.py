"""Named logger registry and environment profiles.

Purpose
-------
Hand out one :class:`Logger` per name and build the three standard profiles
(development, production, test) without any module-level singleton: callers
construct a :class:`LoggerRegistry` and pass it where it is needed.

Contents
--------
* :class:`LoggerRegistry` – create/get loggers, profile factories, bulk close.
* :func:`create_logger` – profile selection from an argument or ``LOG_ENVIRONMENT``.

System Role
-----------
Outermost composition helper. It reads configuration through
:mod:`lib_log_pipeline.config` and wires concrete adapters into loggers.
"""

from __future__ import annotations

import asyncio
import os
import threading
from typing import Any, Iterable

from lib_log_pipeline import config
from lib_log_pipeline.adapters import RichConsoleSink, RotatingFileSink
from lib_log_pipeline.application.ports import ClockPort, Middleware
from lib_log_pipeline.application.use_cases import DiagnosticHook
from lib_log_pipeline.domain import LogLevel

from .logger import Logger, LoggerConfig

PRODUCTION_MAX_SIZE = 50 * 1024 * 1024
PRODUCTION_MAX_FILES = 10


class LoggerRegistry:
    """Own named loggers created from a shared default configuration.

    Parameters
    ----------
    default_config:
        Base configuration merged with the per-call overrides.
    middleware:
        Middleware installed on every logger the registry creates.
    clock, diagnostic:
        Forwarded to each :class:`Logger`.

    Examples
    --------
    >>> registry = LoggerRegistry()
    >>> api = registry.create('api', level='debug')
    >>> api.default_meta
    {'logger': 'api'}
    >>> registry.get('api') is api
    True
    """

    def __init__(
        self,
        default_config: LoggerConfig | None = None,
        *,
        middleware: Iterable[Middleware] | None = None,
        clock: ClockPort | None = None,
        diagnostic: DiagnosticHook = None,
    ) -> None:
        self._default_config = default_config or LoggerConfig()
        self._middleware = tuple(middleware or ())
        self._clock = clock
        self._diagnostic = diagnostic
        self._loggers: dict[str, Logger] = {}
        self._lock = threading.Lock()

    @property
    def default_config(self) -> LoggerConfig:
        return self._default_config

    def create(self, name: str, **overrides: Any) -> Logger:
        """Create (or replace) the logger registered as ``name``.

        ``overrides`` accepts the :class:`LoggerConfig` fields; ``default_meta``
        is merged over the registry default and always gains ``{"logger": name}``.
        """
        meta = {**(overrides.pop("default_meta", None) or {}), "logger": name}
        merged = self._default_config.merged(default_meta=meta, **overrides)
        logger = Logger.from_config(
            merged,
            middleware=self._middleware,
            clock=self._clock,
            diagnostic=self._diagnostic,
        )
        with self._lock:
            self._loggers[name] = logger
        return logger

    def get(self, name: str) -> Logger:
        """Return the logger called ``name``, creating it with defaults when absent."""
        with self._lock:
            existing = self._loggers.get(name)
        if existing is not None:
            return existing
        return self.create(name)

    def names(self) -> list[str]:
        with self._lock:
            return list(self._loggers)

    def create_development_logger(self, name: str) -> Logger:
        """``DEBUG`` threshold with a coloured console."""
        return self.create(
            name,
            level=LogLevel.DEBUG,
            sinks=[RichConsoleSink(level=LogLevel.DEBUG, colors=True, timestamp=True)],
        )

    def create_production_logger(self, name: str, log_file: str | os.PathLike[str] | None = None) -> Logger:
        """``INFO`` threshold, JSON console and rotating JSON file, exit on fatal."""
        target = log_file if log_file is not None else config.production_log_file()
        return self.create(
            name,
            level=LogLevel.INFO,
            sinks=[
                RichConsoleSink(level=LogLevel.INFO, json=True),
                RotatingFileSink(
                    target,
                    level=LogLevel.INFO,
                    json=True,
                    max_size=PRODUCTION_MAX_SIZE,
                    max_files=PRODUCTION_MAX_FILES,
                ),
            ],
            exit_on_error=True,
        )

    def create_test_logger(self, name: str) -> Logger:
        """``TRACE`` threshold, silent and without sinks."""
        return self.create(name, level=LogLevel.TRACE, sinks=[], silent=True)

    async def close_all_async(self) -> None:
        """Close every registered logger and forget them."""
        with self._lock:
            loggers = list(self._loggers.values())
            self._loggers.clear()
        await asyncio.gather(*(logger.close_async() for logger in loggers))

    def close_all(self) -> None:
        """Synchronous variant of :meth:`close_all_async`."""
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(self.close_all_async())
            return
        raise RuntimeError("close_all() cannot run inside an active event loop; await close_all_async() instead")


def create_logger(
    registry: LoggerRegistry,
    name: str,
    environment: str | None = None,
    *,
    log_file: str | os.PathLike[str] | None = None,
) -> Logger:
    """Create ``name`` with the profile chosen by ``environment`` or ``LOG_ENVIRONMENT``.

    ``LOG_LEVEL`` overrides the profile threshold when set.
    """

    profile = config.resolve_environment(environment)
    if profile == "production":
        logger = registry.create_production_logger(name, log_file)
    elif profile == "test":
        logger = registry.create_test_logger(name)
    else:
        logger = registry.create_development_logger(name)
    override = config.env_level()
    if override is not None:
        logger.set_level(override)
    return logger


__all__ = ["PRODUCTION_MAX_FILES", "PRODUCTION_MAX_SIZE", "LoggerRegistry", "create_logger"]
