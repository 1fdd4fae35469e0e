# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (state, options, configuration)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any

import typer

from ..config import ProbeConfig
from ..config_loader import load_config
from ..errors import ConfigError
from ..logging import fail

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="TOML file holding a [corosync] table.", dir_okay=False),
]
SudoOption = Annotated[
    bool | None,
    typer.Option("--sudo/--no-sudo", help="Run the diagnostic tools through sudo (default: on)."),
]


@dataclass(slots=True)
class CLIState:
    """Presentation preferences shared by every command."""

    use_emoji: bool = True
    use_color: bool = True


def get_state(ctx: typer.Context) -> CLIState:
    """Return the :class:`CLIState` stored by the application callback."""

    state = ctx.find_object(CLIState)
    return state if state is not None else CLIState()


def load_cli_config(state: CLIState, config_path: Path | None, overrides: dict[str, Any]) -> ProbeConfig:
    """Load configuration, turning :class:`ConfigError` into a failed exit.

    Args:
        state: Presentation preferences for the failure message.
        config_path: Optional explicit configuration file.
        overrides: Command-line values taking precedence over the file.

    Returns:
        ProbeConfig: Validated configuration.

    Raises:
        typer.Exit: When configuration resolution fails.
    """

    try:
        return load_config(config_path, overrides=overrides)
    except ConfigError as exc:
        fail(f"Configuration invalid: {exc}", use_emoji=state.use_emoji, use_color=state.use_color)
        raise typer.Exit(code=1) from exc


__all__ = ["CLIState", "ConfigOption", "SudoOption", "get_state", "load_cli_config"]
