"""Static package metadata surfaced by the CLI ``info`` command."""

from __future__ import annotations

from typing import Callable

name = "lib_log_pipeline"
title = "Structured logging pipeline with middleware and pluggable sinks"
version = "0.1.0"
homepage = "https://github.com/bitranox/lib_log_pipeline"
author = "bitranox"
author_email = "bitranox@gmail.com"
shell_command = "lib_log_pipeline"


def print_info(*, writer: Callable[[str], object] | None = None) -> None:
    """Emit the metadata banner line by line through ``writer`` (stdout by default)."""

    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("homepage", homepage),
        ("author", author),
        ("author_email", author_email),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    emit = writer or (lambda text: print(text, end=""))
    emit(f"Info for {name}:\n\n")
    for label, value in fields:
        emit(f"    {label:<{pad}} = {value}\n")


__all__ = ["author", "author_email", "homepage", "name", "print_info", "shell_command", "title", "version"]
