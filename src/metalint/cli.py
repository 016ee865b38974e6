# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command line entry point for metalint."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Annotated, Final

import typer

from .config import ConfigLayer, RunConfiguration, build_configuration, default_layer
from .config_loader import discover_source, load_layer
from .errors import MetalintError
from .logging import CLILogger, build_cli_logger
from .orchestrator import Orchestrator
from .process import ToolInvoker
from .reporting import render_report

_MAPPING_SEPARATOR: Final[str] = ":"

app = typer.Typer(
    add_completion=False,
    help="Aggregate and normalise the output of a whole bunch of linters.",
)


def _parse_mapping(values: Sequence[str] | None, *, option: str, placeholder: str) -> dict[str, str]:
    """Split ``NAME:VALUE`` option values into a mapping.

    Args:
        values: Raw repeated option values.
        option: Option name used in error messages.
        placeholder: Expected shape shown in error messages.

    Returns:
        dict[str, str]: Mapping of names to values; later entries win.

    Raises:
        typer.BadParameter: If an entry lacks the separator or a name.
    """

    parsed: dict[str, str] = {}
    for raw in values or ():
        name, sep, value = raw.partition(_MAPPING_SEPARATOR)
        if not sep or not name.strip():
            raise typer.BadParameter(f"expected {placeholder}, got {raw!r}", param_hint=option)
        parsed[name.strip()] = value
    return parsed


def _build_cli_layer(
    *,
    path: str | None,
    concurrency: int | None,
    fast: bool,
    debug: bool,
    exclude: str | None,
    disable: Sequence[str] | None,
    linters: Sequence[str] | None,
    message_overrides: Sequence[str] | None,
    severity: Sequence[str] | None,
) -> ConfigLayer:
    return ConfigLayer(
        path=path,
        concurrency=concurrency,
        fast=True if fast else None,
        debug=True if debug else None,
        exclude=exclude,
        disable=tuple(disable or ()),
        linters=_parse_mapping(linters, option="--linter", placeholder="NAME:COMMAND:PATTERN"),
        message_overrides=_parse_mapping(
            message_overrides,
            option="--message-overrides",
            placeholder="LINTER:MESSAGE",
        ),
        severity=_parse_mapping(severity, option="--severity", placeholder="LINTER:SEVERITY"),
    )


def run(config: RunConfiguration, logger: CLILogger) -> list[str]:
    """Run every enabled checker for ``config`` and return the rendered report.

    Args:
        config: Merged run configuration.
        logger: Diagnostic logger shared by the invoker and orchestrator.

    Returns:
        list[str]: Sorted, filtered report lines.
    """

    orchestrator = Orchestrator(invoker=ToolInvoker(logger), logger=logger)
    issues = orchestrator.run(config)
    return render_report(issues, config.exclude)


@app.command()
def lint(
    path: Annotated[
        str | None,
        typer.Argument(help="Directory to lint.", show_default="."),
    ] = None,
    fast: Annotated[bool, typer.Option("--fast", help="Only run fast linters.")] = False,
    disable: Annotated[
        list[str] | None,
        typer.Option("--disable", "-D", metavar="LINTER", help="List of linters to disable."),
    ] = None,
    debug: Annotated[
        bool,
        typer.Option("--debug", "-d", help="Display messages for failed linters, etc."),
    ] = False,
    concurrency: Annotated[
        int | None,
        typer.Option(
            "--concurrency",
            "-j",
            min=1,
            show_default="16",
            help="Number of concurrent linters to run.",
        ),
    ] = None,
    exclude: Annotated[
        str | None,
        typer.Option("--exclude", metavar="REGEXP", help="Exclude messages matching this regular expression."),
    ] = None,
    linter: Annotated[
        list[str] | None,
        typer.Option("--linter", metavar="NAME:COMMAND:PATTERN", help="Specify a linter."),
    ] = None,
    message_overrides: Annotated[
        list[str] | None,
        typer.Option(
            "--message-overrides",
            metavar="LINTER:MESSAGE",
            help="Override message from linter. {message} will be expanded to the original message.",
        ),
    ] = None,
    severity: Annotated[
        list[str] | None,
        typer.Option("--severity", metavar="LINTER:SEVERITY", help="Map of linter severities."),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", metavar="FILE", help="Read settings from this TOML file."),
    ] = None,
) -> None:
    """Run the configured linters against PATH and print normalised issues."""

    logger = build_cli_logger(debug=debug)
    try:
        cli_layer = _build_cli_layer(
            path=path,
            concurrency=concurrency,
            fast=fast,
            debug=debug,
            exclude=exclude,
            disable=disable,
            linters=linter,
            message_overrides=message_overrides,
            severity=severity,
        )
        file_layer = load_layer(discover_source(Path.cwd(), config_file))
        config = build_configuration([default_layer(), file_layer, cli_layer])
        logger = build_cli_logger(debug=config.debug)
        lines = run(config, logger)
    except MetalintError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=1) from exc
    for line in lines:
        typer.echo(line)


def main() -> None:
    """Console-script entry point."""

    app()


__all__ = ["app", "lint", "main", "run"]
