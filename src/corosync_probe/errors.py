# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared across the collector."""

from __future__ import annotations

from collections.abc import Sequence


class CorosyncProbeError(Exception):
    """Base class for every error raised by :mod:`corosync_probe`."""


class ConfigError(CorosyncProbeError):
    """Raised when configuration input is invalid."""


class ToolNotFoundError(CorosyncProbeError):
    """Raised when a required executable cannot be located on ``PATH``."""

    def __init__(self, tool: str) -> None:
        """Initialise the error for the missing ``tool``.

        Args:
            tool: Executable name that failed to resolve.
        """

        super().__init__(f"unable to locate {tool} in PATH")
        self.tool = tool


class ProcessTimeoutError(CorosyncProbeError):
    """Raised when a bounded command exceeds its wall-clock budget."""

    def __init__(self, command: Sequence[str], timeout: float) -> None:
        """Initialise the error with the command and the exceeded budget.

        Args:
            command: Argument vector that was executed.
            timeout: Budget in seconds that elapsed before the process group was killed.
        """

        super().__init__(f"Command '{command[0]}' timed out after {timeout:.1f}s")
        self.command = tuple(command)
        self.timeout = timeout


class ProcessExecutionError(CorosyncProbeError):
    """Raised when a command exits non-zero or cannot be spawned at all."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int | None,
        output: bytes = b"",
        *,
        reason: str | None = None,
    ) -> None:
        """Initialise the error with captured process metadata.

        Args:
            command: Argument vector that was executed.
            returncode: Exit status, or ``None`` when the process never started.
            output: Combined stdout/stderr captured before the failure.
            reason: Optional OS-level failure description for spawn errors.
        """

        if returncode is None:
            message = f"Command '{command[0]}' could not be started: {reason or 'unknown error'}"
        else:
            tail = output.decode(errors="replace").strip() or "<none>"
            message = f"Command '{command[0]}' exited with status {returncode}. output: {tail}"
        super().__init__(message)
        self.command = tuple(command)
        self.returncode = returncode
        self.output = output


class ParseError(CorosyncProbeError):
    """Base class for tool output that does not match the expected grammar."""


class ParseGrammarError(ParseError):
    """Raised when an expected block is absent from the tool output."""

    def __init__(self, section: str) -> None:
        """Initialise the error for the missing ``section``.

        Args:
            section: Name of the output block that could not be located.
        """

        super().__init__(f"{section} block not found in tool output")
        self.section = section


class ParseFieldError(ParseError):
    """Raised when a labelled field is present but holds an invalid value."""

    def __init__(self, field: str, value: str, *, expected: str) -> None:
        """Initialise the error with the offending field and value.

        Args:
            field: Label of the field as printed by the tool.
            value: Raw text captured for the field.
            expected: Short description of the accepted values.
        """

        super().__init__(f"unable to parse {field}: {value!r} is not {expected}")
        self.field = field
        self.value = value


class CollectionError(CorosyncProbeError):
    """Raised when a collection cycle is aborted; the cause is chained."""


class CommandFailedError(CollectionError):
    """A diagnostic tool failed to run to completion within its budget."""

    def __init__(self, tool: str, cause: CorosyncProbeError) -> None:
        super().__init__(f"command {tool} failed: {cause}")
        self.tool = tool


class SnapshotParseError(CollectionError):
    """The output of a diagnostic tool could not be parsed."""

    def __init__(self, tool: str, section: str, cause: ParseError) -> None:
        super().__init__(f"unable to parse {tool} {section} output: {cause}")
        self.tool = tool
        self.section = section


__all__ = [
    "CollectionError",
    "CommandFailedError",
    "ConfigError",
    "CorosyncProbeError",
    "ParseError",
    "ParseFieldError",
    "ParseGrammarError",
    "ProcessExecutionError",
    "ProcessTimeoutError",
    "SnapshotParseError",
    "ToolNotFoundError",
]
