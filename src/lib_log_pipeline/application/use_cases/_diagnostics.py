"""Diagnostic side channel shared by the pipeline use cases.

Failures inside the pipeline never reach the caller of ``log``. They are written
to the standard :mod:`logging` error channel and forwarded to an optional
host-provided hook receiving ``(event_name, payload)``.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

DiagnosticHook = Callable[[str, dict[str, Any]], None] | None
Emit = Callable[[str, dict[str, Any]], None]

LOGGER = logging.getLogger("lib_log_pipeline")


def build_diagnostic_emitter(diagnostic: DiagnosticHook) -> Emit:
    """Wrap ``diagnostic`` so a failing hook cannot break the pipeline."""

    def emit(event_name: str, payload: dict[str, Any]) -> None:
        if diagnostic is None:
            return
        try:
            diagnostic(event_name, payload)
        except Exception:
            LOGGER.exception("Diagnostic hook failed for %s", event_name)

    return emit


def report_failure(event_name: str, subject: str, exc: BaseException, emit: Emit) -> None:
    """Log ``exc`` against ``subject`` and notify the diagnostic hook."""

    LOGGER.error("%s: %s failed: %s", event_name, subject, exc, exc_info=(type(exc), exc, exc.__traceback__))
    emit(event_name, {"subject": subject, "error": repr(exc)})


__all__ = ["DiagnosticHook", "Emit", "LOGGER", "build_diagnostic_emitter", "report_failure"]
