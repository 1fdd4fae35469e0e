# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Bounded wrappers around ``subprocess`` execution."""

from __future__ import annotations

import logging
import os
import shutil
import signal

# Bandit: subprocess usage is intentional; commands are argument lists resolved
# ahead of time and ``shell=True`` is never used.
import subprocess  # nosec B404
import time
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .errors import ProcessExecutionError, ProcessTimeoutError

COMMAND_TIMEOUT: Final[float] = 5.0

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandOutput:
    """Combined output and exit status of a finished command."""

    args: tuple[str, ...]
    output: bytes
    returncode: int

    @property
    def ok(self) -> bool:
        """Return ``True`` when the command exited with status zero."""

        return self.returncode == 0


def _normalize_args(args: Sequence[str]) -> list[str]:
    """Return ``args`` with the executable resolved to an absolute path.

    Args:
        args: Raw command arguments supplied by the caller.

    Returns:
        list[str]: Argument list suitable for :class:`subprocess.Popen`.

    Raises:
        ValueError: If no arguments are provided.
        ProcessExecutionError: If the executable cannot be found on ``PATH``.
    """

    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        raise ProcessExecutionError(args, None, reason=f"executable '{head}' was not found on PATH")
    return [resolved, *rest]


def _kill_process_group(process: subprocess.Popen[bytes]) -> None:
    """Send ``SIGKILL`` to every member of the process group led by ``process``."""

    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        # The group already exited between the timeout and the kill.
        pass
    if process.stdout is not None:
        process.stdout.close()
    process.wait()


def run_bounded(
    args: Sequence[str],
    *,
    timeout: float = COMMAND_TIMEOUT,
    check: bool = True,
) -> CommandOutput:
    """Execute *args* and return its combined output within ``timeout`` seconds.

    The command runs in a new session so that it leads its own process group.
    When the budget expires the whole group is killed, which also takes down any
    helpers the command spawned, and no partial output is returned.

    Args:
        args: Command to execute; the first element names the executable.
        timeout: Wall-clock budget in seconds.
        check: Raise :class:`ProcessExecutionError` on a non-zero exit status.

    Returns:
        CommandOutput: Interleaved stdout/stderr bytes and the exit status.

    Raises:
        ProcessTimeoutError: If the command did not finish within ``timeout``.
        ProcessExecutionError: If the command could not be started, or exited
            non-zero while ``check`` is true.
    """

    normalized = _normalize_args(args)
    LOGGER.debug("running command=%s timeout=%.1f", " ".join(normalized), timeout)
    started = time.monotonic()
    try:
        # Bandit: argument list without shell expansion.
        process = subprocess.Popen(  # nosec B603
            normalized,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            start_new_session=True,
        )
    except OSError as exc:
        raise ProcessExecutionError(normalized, None, reason=str(exc)) from exc

    try:
        output, _ = process.communicate(timeout=timeout)
    except subprocess.TimeoutExpired as exc:
        _kill_process_group(process)
        LOGGER.debug("killed process group pgid=%d after %.1fs", process.pid, timeout)
        raise ProcessTimeoutError(normalized, timeout) from exc

    completed = CommandOutput(args=tuple(normalized), output=output, returncode=process.returncode)
    LOGGER.debug(
        "command finished returncode=%d bytes=%d elapsed=%.3fs",
        completed.returncode,
        len(completed.output),
        time.monotonic() - started,
    )
    if check and not completed.ok:
        raise ProcessExecutionError(normalized, completed.returncode, completed.output)
    return completed


__all__ = ["COMMAND_TIMEOUT", "CommandOutput", "run_bounded"]
