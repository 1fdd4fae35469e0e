# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsers for ``corosync-quorumtool`` output."""

from __future__ import annotations

from typing import Final

from ..errors import ParseFieldError
from ..models import QuorumStatus, VoteTally
from .base import LabelledField, decode_output, labelled_block, parse_uint, search_block

QUORUM_SECTION: Final[str] = "quorum"
VOTEQUORUM_SECTION: Final[str] = "votequorum"

QUORATE_VALUES: Final[dict[str, bool]] = {"Yes": True, "No": False}

QUORUM_PATTERN = labelled_block(
    (
        LabelledField("Date", "date", r"[^\n]+?"),
        LabelledField("Quorum provider", "provider", r"\w+"),
        LabelledField("Nodes", "nodes"),
        LabelledField("Node ID", "node_id"),
        LabelledField("Ring ID", "ring_id", r"[\w.]+"),
        LabelledField("Quorate", "quorate"),
    ),
)

VOTEQUORUM_PATTERN = labelled_block(
    (
        LabelledField("Expected votes", "expected"),
        LabelledField("Highest expected", "highest"),
        LabelledField("Total votes", "total"),
        LabelledField("Quorum", "quorum", suffix=r"(?:[ \t]+Activity blocked)?"),
        LabelledField("Flags", "flags", r"[^\n]*?"),
    ),
)


def parse_quorum_status(output: bytes | str) -> QuorumStatus:
    """Parse the "Quorum information" block.

    Args:
        output: Combined output of ``corosync-quorumtool``.

    Returns:
        QuorumStatus: Node id, ring id, quorate flag and node count.

    Raises:
        ParseGrammarError: If the block is not present.
        ParseFieldError: If a field is present but holds an invalid value.
    """

    match = search_block(QUORUM_PATTERN, decode_output(output), section=QUORUM_SECTION)
    total_nodes = parse_uint(match.group("nodes"), "Nodes")
    node_id = parse_uint(match.group("node_id"), "Node ID")
    quorate = match.group("quorate")
    if quorate not in QUORATE_VALUES:
        raise ParseFieldError("Quorate", quorate, expected="'Yes' or 'No'")
    return QuorumStatus(
        node_id=node_id,
        ring_id=match.group("ring_id"),
        is_quorate=QUORATE_VALUES[quorate],
        total_nodes=total_nodes,
    )


def parse_vote_tally(output: bytes | str) -> VoteTally:
    """Parse the "Votequorum information" block.

    Args:
        output: Combined output of ``corosync-quorumtool``.

    Returns:
        VoteTally: Vote counts and the ordered status flags.

    Raises:
        ParseGrammarError: If the block is not present.
        ParseFieldError: If a numeric field holds an invalid value.
    """

    match = search_block(VOTEQUORUM_PATTERN, decode_output(output), section=VOTEQUORUM_SECTION)
    return VoteTally(
        expected_votes=parse_uint(match.group("expected"), "Expected votes"),
        highest_expected=parse_uint(match.group("highest"), "Highest expected"),
        total_votes=parse_uint(match.group("total"), "Total votes"),
        quorum=parse_uint(match.group("quorum"), "Quorum"),
        flags=tuple(match.group("flags").split()),
    )


__all__ = ["QUORUM_SECTION", "VOTEQUORUM_SECTION", "parse_quorum_status", "parse_vote_tally"]
