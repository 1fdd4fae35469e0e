# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from pathlib import Path

import pytest

from corosync_probe.errors import CorosyncProbeError
from corosync_probe.process_utils import CommandOutput
from corosync_probe.tooling import ToolPaths

DATA_DIR = Path(__file__).resolve().parent / "data"

QUORUM_TOOL = "/usr/sbin/corosync-quorumtool"
CFG_TOOL = "/usr/sbin/corosync-cfgtool"


def load_sample(name: str) -> bytes:
    """Return the raw bytes of a captured tool output under ``tests/data``."""
    return (DATA_DIR / name).read_bytes()


class FakeRunner:
    """Command runner returning canned output keyed by executable name."""

    def __init__(self, responses: Mapping[str, bytes | CorosyncProbeError]) -> None:
        self.responses = dict(responses)
        self.calls: list[list[str]] = []

    def __call__(self, args: Sequence[str]) -> CommandOutput:
        self.calls.append(list(args))
        tool = next(Path(arg).name for arg in args if Path(arg).name in self.responses)
        response = self.responses[tool]
        if isinstance(response, CorosyncProbeError):
            raise response
        return CommandOutput(args=tuple(args), output=response, returncode=0)


@pytest.fixture
def tool_paths() -> ToolPaths:
    return ToolPaths(quorum_tool=QUORUM_TOOL, cfg_tool=CFG_TOOL)


@pytest.fixture
def two_node_runner() -> FakeRunner:
    return FakeRunner(
        {
            "corosync-quorumtool": load_sample("quorumtool_two_node.txt"),
            "corosync-cfgtool": load_sample("cfgtool_two_node.txt"),
        },
    )


@pytest.fixture
def make_runner() -> Callable[[Mapping[str, bytes | CorosyncProbeError]], FakeRunner]:
    return FakeRunner


@pytest.fixture
def sample() -> Callable[[str], bytes]:
    return load_sample
