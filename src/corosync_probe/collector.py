# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Snapshot assembly and metric emission for one collection cycle.

A cycle runs ``corosync-quorumtool`` and ``corosync-cfgtool -sb`` one after
the other, parses both outputs into a :class:`NodeSnapshot` and only then
hands metric points to the sink. Any failure aborts the cycle before the sink
sees a single point, and nothing is retried: the next scheduled cycle starts
from scratch.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Final

from .config import ProbeConfig
from .errors import (
    CommandFailedError,
    ParseError,
    ProcessExecutionError,
    ProcessTimeoutError,
    SnapshotParseError,
)
from .metrics import MetricSink
from .models import MetricPoint, NodeSnapshot
from .parsers.links import parse_link_statuses
from .parsers.quorum import QUORUM_SECTION, VOTEQUORUM_SECTION, parse_quorum_status, parse_vote_tally
from .process_utils import COMMAND_TIMEOUT, CommandOutput, run_bounded
from .tooling import ToolPaths, resolve_tools

QUORUM_MEASUREMENT: Final[str] = "corosync_quorum"
RINGS_MEASUREMENT: Final[str] = "corosync_rings"
LINKS_SECTION: Final[str] = "link status"

CommandRunner = Callable[[Sequence[str]], CommandOutput]

LOGGER = logging.getLogger(__name__)


def _default_runner(args: Sequence[str]) -> CommandOutput:
    return run_bounded(args, timeout=COMMAND_TIMEOUT, check=True)


def build_points(snapshot: NodeSnapshot) -> list[MetricPoint]:
    """Convert ``snapshot`` into gauge points.

    Args:
        snapshot: Fully parsed node status.

    Returns:
        list[MetricPoint]: One quorum point tagged by node id followed by one
        point per link tagged by its ring id.
    """

    quorum, votes = snapshot.quorum, snapshot.votes
    points = [
        MetricPoint(
            measurement=QUORUM_MEASUREMENT,
            fields={
                "is_quorate": quorum.is_quorate,
                "total_nodes": quorum.total_nodes,
                "ring_id": quorum.ring_id,
                "total_votes": votes.total_votes,
                "expected_votes": votes.expected_votes,
                "highest_expected": votes.highest_expected,
                "quorum": votes.quorum,
            },
            tags={"node_id": str(quorum.node_id)},
        ),
    ]
    for link in snapshot.links:
        counts = link.counts
        points.append(
            MetricPoint(
                measurement=RINGS_MEASUREMENT,
                fields={
                    "active": counts.active,
                    "connected": counts.connected,
                    "enabled": counts.enabled,
                    "unknown": counts.unknown,
                    "undefined": counts.undefined,
                    "total": link.total,
                },
                tags={"ring_id": str(link.ring_id)},
            ),
        )
    return points


class CorosyncCollector:
    """Gather a :class:`NodeSnapshot` from the local Corosync daemon."""

    def __init__(self, tools: ToolPaths, *, runner: CommandRunner | None = None) -> None:
        """Initialise the collector.

        Args:
            tools: Resolved executables, including the optional sudo prefix.
            runner: Command runner override; defaults to :func:`run_bounded`
                with the fixed five second budget.
        """

        self._tools = tools
        self._runner = runner or _default_runner

    @classmethod
    def from_config(cls, config: ProbeConfig, *, runner: CommandRunner | None = None) -> CorosyncCollector:
        """Resolve the executables named by ``config`` and build a collector.

        Raises:
            ToolNotFoundError: If an executable is missing from ``PATH``.
        """

        return cls(resolve_tools(config), runner=runner)

    @property
    def tools(self) -> ToolPaths:
        return self._tools

    def _run(self, command: Sequence[str], tool: str) -> bytes:
        try:
            return self._runner(command).output
        except (ProcessTimeoutError, ProcessExecutionError) as exc:
            raise CommandFailedError(tool, exc) from exc

    def gather(self) -> NodeSnapshot:
        """Run both tools and parse their output into a fresh snapshot.

        Returns:
            NodeSnapshot: Quorum status, vote tally and link statuses.

        Raises:
            CommandFailedError: If either tool times out or fails.
            SnapshotParseError: If the output does not match the expected grammar.
        """

        quorum_tool = Path(self._tools.quorum_tool).name
        cfg_tool = Path(self._tools.cfg_tool).name
        quorum_output = self._run(self._tools.quorum_command(), quorum_tool)
        cfg_output = self._run(self._tools.cfg_command(), cfg_tool)

        try:
            quorum = parse_quorum_status(quorum_output)
        except ParseError as exc:
            raise SnapshotParseError(quorum_tool, QUORUM_SECTION, exc) from exc
        try:
            votes = parse_vote_tally(quorum_output)
        except ParseError as exc:
            raise SnapshotParseError(quorum_tool, VOTEQUORUM_SECTION, exc) from exc
        try:
            links = parse_link_statuses(cfg_output)
        except ParseError as exc:
            raise SnapshotParseError(cfg_tool, LINKS_SECTION, exc) from exc

        LOGGER.debug(
            "gathered snapshot node_id=%d quorate=%s links=%d",
            quorum.node_id,
            quorum.is_quorate,
            len(links),
        )
        return NodeSnapshot(quorum=quorum, votes=votes, links=links)

    def collect(self, sink: MetricSink) -> NodeSnapshot:
        """Run one cycle and emit its points to ``sink``.

        Args:
            sink: Destination for the gauge points.

        Returns:
            NodeSnapshot: The snapshot the points were derived from.

        Raises:
            CollectionError: If the cycle fails; ``sink`` receives nothing.
        """

        snapshot = self.gather()
        for point in build_points(snapshot):
            sink.add_gauge(point.measurement, point.fields, point.tags)
        return snapshot


__all__ = [
    "QUORUM_MEASUREMENT",
    "RINGS_MEASUREMENT",
    "CommandRunner",
    "CorosyncCollector",
    "build_points",
]
