from __future__ import annotations

import lib_log_pipeline
from lib_log_pipeline import __init__conf__


def test_public_surface_exports_pipeline_objects() -> None:
    for name in ("Logger", "LoggerRegistry", "LogLevel", "MemorySink", "RotatingFileSink", "NetworkSink", "middleware"):
        assert hasattr(lib_log_pipeline, name)
    assert set(lib_log_pipeline.__all__) <= set(dir(lib_log_pipeline))


def test_print_info_lists_metadata() -> None:
    lines: list[str] = []
    __init__conf__.print_info(writer=lines.append)
    assert lines[0] == f"Info for {__init__conf__.name}:\n\n"
    assert any(line.strip() == f"shell_command = {__init__conf__.shell_command}" for line in lines)
