# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands and shared services."""

from __future__ import annotations

from typing import Annotated

import typer

from .. import __version__
from ..config import sample_config
from ..logging import configure_logging
from .collect import collect_command, serve_command
from .doctor import doctor_command
from .shared import CLIState

app = typer.Typer(
    name="corosync-probe",
    help="Collect Corosync quorum and link health metrics.",
    no_args_is_help=True,
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"corosync-probe {__version__}")
        raise typer.Exit()


@app.callback()
def _root(
    ctx: typer.Context,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging on stderr.")] = False,
    no_emoji: Annotated[bool, typer.Option("--no-emoji", help="Disable emoji in status messages.")] = False,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable coloured output.")] = False,
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show the version and exit."),
    ] = False,
) -> None:
    """Collect Corosync quorum and link health metrics."""

    del version
    configure_logging(verbose=verbose)
    ctx.obj = CLIState(use_emoji=not no_emoji, use_color=not no_color)


@app.command("sample-config")
def sample_config_command() -> None:
    """Print the default configuration as TOML."""

    typer.echo(sample_config(), nl=False)


app.command("collect")(collect_command)
app.command("serve")(serve_command)
app.command("doctor")(doctor_command)


def main() -> None:
    """Console script entry point."""

    app()


__all__ = ["app", "main"]
