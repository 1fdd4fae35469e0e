# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolution of the Corosync diagnostic executables."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from typing import Final

from .config import ProbeConfig
from .errors import ToolNotFoundError

CFG_TOOL_ARGS: Final[tuple[str, ...]] = ("-sb",)

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ToolPaths:
    """Absolute paths of the executables invoked on every cycle."""

    quorum_tool: str
    cfg_tool: str
    sudo: str | None = None

    def _prefix(self) -> list[str]:
        return [self.sudo] if self.sudo is not None else []

    def quorum_command(self) -> list[str]:
        """Return the argv used to query quorum and votequorum state."""

        return [*self._prefix(), self.quorum_tool]

    def cfg_command(self) -> list[str]:
        """Return the argv used to query brief link status."""

        return [*self._prefix(), self.cfg_tool, *CFG_TOOL_ARGS]


def _which(tool: str) -> str:
    resolved = shutil.which(tool)
    if resolved is None:
        raise ToolNotFoundError(tool)
    return resolved


def resolve_tools(config: ProbeConfig) -> ToolPaths:
    """Locate every executable the configuration requires.

    Args:
        config: Collector configuration naming the executables.

    Returns:
        ToolPaths: Absolute paths, with ``sudo`` set only when escalation is enabled.

    Raises:
        ToolNotFoundError: If any required executable is missing from ``PATH``.
    """

    paths = ToolPaths(
        cfg_tool=_which(config.cfg_tool),
        quorum_tool=_which(config.quorum_tool),
        sudo=_which(config.sudo) if config.use_sudo else None,
    )
    LOGGER.debug("resolved tools quorum=%s cfg=%s sudo=%s", paths.quorum_tool, paths.cfg_tool, paths.sudo)
    return paths


def required_tools(config: ProbeConfig) -> tuple[str, ...]:
    """Return the executable names ``config`` needs, in resolution order."""

    names = (config.cfg_tool, config.quorum_tool)
    return (*names, config.sudo) if config.use_sudo else names


__all__ = ["ToolPaths", "required_tools", "resolve_tools"]
