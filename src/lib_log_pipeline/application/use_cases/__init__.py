"""Application use cases: middleware chain, fan-out and shutdown."""

from __future__ import annotations

from ._diagnostics import DiagnosticHook, build_diagnostic_emitter
from .fan_out import FanOutCallable, build_fan_out
from .process_entry import run_middleware_chain
from .shutdown import create_shutdown

__all__ = [
    "DiagnosticHook",
    "FanOutCallable",
    "build_diagnostic_emitter",
    "build_fan_out",
    "create_shutdown",
    "run_middleware_chain",
]
