"""Click command line interface.

Purpose
-------
Offer a metadata banner (``info``) and a pipeline demonstration
(``logdemo``) so packaging smoke tests and operators can exercise the library
without writing code.

Contents
--------
* :func:`cli` – root group with ``--version`` and the dotenv toggle.
* :func:`info` / :func:`logdemo` – subcommands.
* :func:`main` – test-friendly wrapper returning an exit code.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Sequence

import click

from . import __init__conf__
from . import config as config_module
from .adapters import RichConsoleSink, RotatingFileSink
from .domain import LogLevel
from .runtime import LoggerRegistry, create_logger, summary_info
from .runtime.middleware import request_id

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_LEVEL_CHOICES = [level.name.lower() for level in LogLevel]


@click.group(invoke_without_command=True, context_settings=CLICK_CONTEXT_SETTINGS)
@click.version_option(__init__conf__.version, "--version", "-V", prog_name=__init__conf__.shell_command)
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=False,
    help="Load environment variables from a nearby .env before running commands.",
)
@click.pass_context
def cli(ctx: click.Context, use_dotenv: bool) -> None:
    """Structured logging pipeline tools."""

    explicit: bool | None = None
    if ctx.get_parameter_source("use_dotenv") is not click.core.ParameterSource.DEFAULT:
        explicit = use_dotenv
    env_toggle = os.getenv(config_module.DOTENV_ENV_VAR)
    if config_module.should_use_dotenv(explicit=explicit, env_value=env_toggle):
        config_module.enable_dotenv()
    if ctx.invoked_subcommand is None:
        click.echo(summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def info() -> None:
    """Print package metadata."""

    click.echo(summary_info(), nl=False)


@cli.command("logdemo", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--environment",
    type=click.Choice(list(config_module.ENVIRONMENTS), case_sensitive=False),
    default=None,
    help="Logger profile; defaults to LOG_ENVIRONMENT, then development.",
)
@click.option("--level", type=click.Choice(_LEVEL_CHOICES, case_sensitive=False), default=None, help="Override the threshold.")
@click.option("--json", "as_json", is_flag=True, help="Render the console as JSON lines.")
@click.option(
    "--file",
    "log_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also append entries to this rotating log file.",
)
def logdemo(environment: str | None, level: str | None, as_json: bool, log_file: Path | None) -> None:
    """Emit one entry per level through a freshly built logger."""

    registry = LoggerRegistry()
    profile = config_module.resolve_environment(environment)
    logger = create_logger(registry, "logdemo", profile, log_file=log_file)
    if level is not None:
        logger.set_level(level)
    if as_json:
        logger.remove_sink("console")
        logger.add_sink(RichConsoleSink(level=logger.get_level(), json=True))
    if log_file is not None and profile != "production":
        logger.add_sink(RotatingFileSink(log_file, level=logger.get_level()))
    logger.use(request_id(lambda: "logdemo-1"))

    logger.trace("trace entry", {"step": 1})
    logger.debug("debug entry", {"step": 2})
    logger.info("info entry", {"step": 3, "user": {"id": 42, "roles": ["admin"]}})
    logger.warn("warn entry", {"step": 4})
    try:
        raise RuntimeError("demo failure")
    except RuntimeError as exc:
        logger.error("error entry", exc, {"step": 5})

    registry.close_all()
    click.echo(f"emitted 5 entries via {profile} profile (level {logger.get_level().name})")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Click group and return its exit code.

    Examples
    --------
    >>> main(["--version"])  # doctest: +ELLIPSIS
    lib_log_pipeline, version ...
    0
    """

    args = list(argv) if argv is not None else None
    try:
        cli.main(args=args, prog_name=__init__conf__.shell_command, standalone_mode=False)
    except click.ClickException as error:
        error.show()
        return error.exit_code
    return 0


__all__ = ["cli", "info", "logdemo", "main"]
