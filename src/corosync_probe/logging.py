# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing logging helpers with optional colour and emoji support."""

from __future__ import annotations

import logging
import sys
from functools import lru_cache
from typing import Literal

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text


def detect_tty() -> bool:
    """Return ``True`` when stdout appears to be backed by a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@lru_cache(maxsize=8)
def get_console(*, color: bool, emoji: bool) -> Console:
    """Return a cached Rich console configured for ``color`` and ``emoji``.

    Args:
        color: ``True`` when ANSI colour output should be enabled.
        emoji: ``True`` when Rich should render emoji glyphs.

    Returns:
        Console: Console matching the presentation flags.
    """

    tty = detect_tty()
    color_system: Literal["auto"] | None = "auto" if color and tty else None
    return Console(
        color_system=color_system,
        force_terminal=tty,
        no_color=not (color and tty),
        emoji=emoji,
        soft_wrap=True,
    )


def emoji(symbol: str, enable: bool) -> str:
    """Return *symbol* when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def _print_line(msg: str, *, style: str, use_emoji: bool, use_color: bool | None = None) -> None:
    color_enabled = detect_tty() if use_color is None else use_color
    console = get_console(color=color_enabled, emoji=use_emoji)
    text = Text(msg)
    if color_enabled:
        text.stylize(style)
    console.print(text)


def info(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an informational message."""

    _print_line(f"{emoji('ℹ️ ', use_emoji)}{msg}", style="cyan", use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a success message."""

    _print_line(f"{emoji('✅ ', use_emoji)}{msg}", style="green", use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit a warning message."""

    _print_line(f"{emoji('⚠️ ', use_emoji)}{msg}", style="yellow", use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Emit an error message."""

    _print_line(f"{emoji('❌ ', use_emoji)}{msg}", style="red", use_emoji=use_emoji, use_color=use_color)


def configure_logging(*, verbose: bool = False) -> None:
    """Route library log records to stderr through Rich.

    Args:
        verbose: Lower the threshold to ``DEBUG`` when true.
    """

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=verbose,
    )
    root = logging.getLogger()
    for existing in list(root.handlers):
        if isinstance(existing, RichHandler):
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)


__all__ = ["configure_logging", "detect_tty", "emoji", "fail", "get_console", "info", "ok", "warn"]
