# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""System diagnostics for the collector host."""

from __future__ import annotations

import shutil
from dataclasses import dataclass

import typer
from rich import box
from rich.console import Console
from rich.rule import Rule
from rich.table import Table

from ..config import ProbeConfig
from ..logging import get_console, ok, warn
from ..tooling import required_tools
from .shared import ConfigOption, get_state, load_cli_config


@dataclass(slots=True)
class ToolCheck:
    """Represents the outcome of resolving one executable."""

    name: str
    path: str | None

    @property
    def ok(self) -> bool:
        return self.path is not None


def check_tools(config: ProbeConfig) -> list[ToolCheck]:
    """Resolve every executable ``config`` requires without failing fast."""

    return [ToolCheck(name=name, path=shutil.which(name)) for name in required_tools(config)]


def run_doctor(config: ProbeConfig, *, console: Console) -> int:
    """Render tool availability and return an exit status (0 healthy, 1 otherwise)."""

    console.print(Rule("[bold cyan]corosync-probe Doctor[/bold cyan]"))
    table = Table(title="Diagnostic tools", box=box.SIMPLE, expand=True)
    table.add_column("Tool", style="bold")
    table.add_column("Status", style="bold")
    table.add_column("Path", overflow="fold")
    checks = check_tools(config)
    for check in checks:
        status = "[green]found[/]" if check.ok else "[red]missing[/]"
        table.add_row(check.name, status, check.path or "-")
    console.print(table)
    escalation = "enabled" if config.use_sudo else "disabled"
    console.print(f"Privilege escalation: {escalation}")
    return 0 if all(check.ok for check in checks) else 1


def doctor_command(ctx: typer.Context, config_path: ConfigOption = None) -> None:
    """Check that the Corosync diagnostic tools can be located."""

    state = get_state(ctx)
    config = load_cli_config(state, config_path, {})
    exit_code = run_doctor(config, console=get_console(color=state.use_color, emoji=state.use_emoji))
    if exit_code == 0:
        ok("All diagnostic tools located", use_emoji=state.use_emoji, use_color=state.use_color)
    else:
        warn("Some diagnostic tools are missing from PATH", use_emoji=state.use_emoji, use_color=state.use_color)
    raise typer.Exit(code=exit_code)


__all__ = ["ToolCheck", "check_tools", "doctor_command", "run_doctor"]
