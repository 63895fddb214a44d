"""Environment-driven configuration helpers.

Purpose
-------
Resolve the logger profile, the level override and the production log file
from environment variables, optionally seeded from the nearest ``.env`` file
via python-dotenv.

Contents
--------
* :func:`enable_dotenv` / :func:`should_use_dotenv` – opt-in ``.env`` loading.
* :func:`resolve_environment`, :func:`env_level`, :func:`production_log_file`.

System Role
-----------
Read by :func:`lib_log_pipeline.runtime.create_logger` and the CLI. Existing
process variables always win over ``.env`` entries.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from lib_log_pipeline.domain import LogLevel

DOTENV_ENV_VAR = "LOG_USE_DOTENV"
ENVIRONMENT_ENV_VAR = "LOG_ENVIRONMENT"
LEVEL_ENV_VAR = "LOG_LEVEL"
LOG_FILE_ENV_VAR = "LOG_FILE"

DEFAULT_ENVIRONMENT = "development"
DEFAULT_LOG_FILE = Path("./logs/app.log")
ENVIRONMENTS = ("development", "production", "test")

_TRUTHY = {"1", "true", "yes", "on"}

_dotenv_state: dict[str, Path | None] = {"loaded": None}


def should_use_dotenv(*, explicit: bool | None = None, env_value: str | None = None) -> bool:
    """Decide whether ``.env`` loading is enabled; an explicit flag beats the env toggle.

    Examples
    --------
    >>> should_use_dotenv(explicit=False, env_value='1')
    False
    >>> should_use_dotenv(env_value='yes')
    True
    """

    if explicit is not None:
        return explicit
    if env_value is None:
        return False
    return env_value.strip().lower() in _TRUTHY


def enable_dotenv(search_from: str | os.PathLike[str] | None = None) -> Path | None:
    """Load the nearest ``.env`` without overriding existing variables.

    The search starts at ``search_from`` (defaults to the working directory)
    and walks up to the filesystem root. Only the first call per process loads
    anything; later calls return the path loaded earlier.
    """

    loaded = _dotenv_state["loaded"]
    if loaded is not None:
        return loaded
    if search_from is None:
        found = find_dotenv(usecwd=True)
    else:
        found = _find_from(Path(search_from))
    if not found:
        return None
    path = Path(found).resolve()
    load_dotenv(path, override=False)
    _dotenv_state["loaded"] = path
    return path


def _find_from(start: Path) -> str:
    start = start.resolve()
    for directory in (start, *start.parents):
        candidate = directory / ".env"
        if candidate.is_file():
            return str(candidate)
    return ""


def _reset_dotenv_state_for_testing() -> None:
    _dotenv_state["loaded"] = None


def resolve_environment(value: str | None = None) -> str:
    """Return the profile name from ``value`` or ``LOG_ENVIRONMENT``.

    Unknown or empty names fall back to ``development``.

    Examples
    --------
    >>> resolve_environment(' Production ')
    'production'
    >>> resolve_environment('staging')
    'development'
    """

    raw = value if value is not None else os.getenv(ENVIRONMENT_ENV_VAR, "")
    candidate = raw.strip().lower()
    return candidate if candidate in ENVIRONMENTS else DEFAULT_ENVIRONMENT


def env_level() -> LogLevel | None:
    """Return the ``LOG_LEVEL`` override, ``None`` when unset.

    Raises
    ------
    ValueError
        When the variable names no known level.
    """

    raw = os.getenv(LEVEL_ENV_VAR)
    if raw is None or not raw.strip():
        return None
    return LogLevel.from_name(raw)


def production_log_file() -> Path:
    """Return ``LOG_FILE`` or ``./logs/app.log``."""

    raw = os.getenv(LOG_FILE_ENV_VAR)
    return Path(raw) if raw else DEFAULT_LOG_FILE


__all__ = [
    "DEFAULT_ENVIRONMENT",
    "DEFAULT_LOG_FILE",
    "DOTENV_ENV_VAR",
    "ENVIRONMENTS",
    "ENVIRONMENT_ENV_VAR",
    "LEVEL_ENV_VAR",
    "LOG_FILE_ENV_VAR",
    "enable_dotenv",
    "env_level",
    "production_log_file",
    "resolve_environment",
    "should_use_dotenv",
]
