# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests covering the Corosync output parsers."""

from __future__ import annotations

import pytest

from corosync_probe.errors import ParseFieldError, ParseGrammarError
from corosync_probe.models import LinkCounts
from corosync_probe.parsers import (
    count_links,
    parse_link_statuses,
    parse_quorum_status,
    parse_vote_tally,
)


def _quorum_block(*, nodes: str = "2", node_id: str = "1", ring_id: str = "1.2f", quorate: str = "Yes") -> str:
    rows = (
        ("Date:", "Tue Mar  7 10:15:42 2023"),
        ("Quorum provider:", "corosync_votequorum"),
        ("Nodes:", nodes),
        ("Node ID:", node_id),
        ("Ring ID:", ring_id),
        ("Quorate:", quorate),
    )
    return "Quorum information\n------------------\n" + "".join(f"{label:<18}{value}\n" for label, value in rows)


def _vote_block(*, expected: str = "2", quorum: str = "1", flags: str = "Quorate") -> str:
    rows = (
        ("Expected votes:", expected),
        ("Highest expected:", "2"),
        ("Total votes:", "2"),
        ("Quorum:", quorum),
        ("Flags:", flags),
    )
    return "Votequorum information\n----------------------\n" + "".join(f"{label:<18}{value}\n" for label, value in rows)


def test_parse_quorum_status_two_node(sample) -> None:
    status = parse_quorum_status(sample("quorumtool_two_node.txt"))

    assert status.node_id == 1
    assert status.ring_id == "1.2f"
    assert status.is_quorate is True
    assert status.total_nodes == 2


def test_parse_quorum_status_single_node(sample) -> None:
    status = parse_quorum_status(sample("quorumtool_single_node.txt"))

    assert status.node_id == 3
    assert status.ring_id == "3.3a"
    assert status.is_quorate is False
    assert status.total_nodes == 1


def test_parsed_values_reproduce_labelled_lines(sample) -> None:
    raw = sample("quorumtool_two_node.txt").decode()
    status = parse_quorum_status(raw)
    votes = parse_vote_tally(raw)

    rendered = [
        f"{'Nodes:':<18}{status.total_nodes}",
        f"{'Node ID:':<18}{status.node_id}",
        f"{'Ring ID:':<18}{status.ring_id}",
        f"{'Quorate:':<18}{'Yes' if status.is_quorate else 'No'}",
        f"{'Expected votes:':<18}{votes.expected_votes}",
        f"{'Highest expected:':<18}{votes.highest_expected}",
        f"{'Total votes:':<18}{votes.total_votes}",
        f"{'Quorum:':<18}{votes.quorum}",
        f"{'Flags:':<18}{' '.join(votes.flags)}",
    ]
    lines = raw.splitlines()
    for line in rendered:
        assert line in lines


@pytest.mark.parametrize(("token", "expected"), [("Yes", True), ("No", False)])
def test_quorate_tokens(token: str, expected: bool) -> None:
    assert parse_quorum_status(_quorum_block(quorate=token)).is_quorate is expected


@pytest.mark.parametrize("token", ["Maybe", "yes", "NO"])
def test_quorate_rejects_unknown_token(token: str) -> None:
    with pytest.raises(ParseFieldError) as excinfo:
        parse_quorum_status(_quorum_block(quorate=token))

    assert excinfo.value.field == "Quorate"
    assert excinfo.value.value == token


def test_quorum_block_missing_is_grammar_error() -> None:
    with pytest.raises(ParseGrammarError) as excinfo:
        parse_quorum_status(b"Cannot initialize QUORUM service\n")

    assert excinfo.value.section == "quorum"


def test_quorum_block_missing_ring_id_line() -> None:
    text = _quorum_block().replace(f"{'Ring ID:':<18}1.2f\n", "")

    with pytest.raises(ParseGrammarError):
        parse_quorum_status(text)


def test_quorum_block_requires_documented_order() -> None:
    text = _quorum_block()
    lines = text.splitlines()
    nodes, node_id = lines[4], lines[5]
    lines[4], lines[5] = node_id, nodes

    with pytest.raises(ParseGrammarError):
        parse_quorum_status("\n".join(lines) + "\n")


def test_non_numeric_node_id_names_the_field() -> None:
    with pytest.raises(ParseFieldError) as excinfo:
        parse_quorum_status(_quorum_block(node_id="abc"))

    assert excinfo.value.field == "Node ID"


def test_node_count_overflow_names_the_field() -> None:
    with pytest.raises(ParseFieldError) as excinfo:
        parse_quorum_status(_quorum_block(nodes=str(2**32)))

    assert excinfo.value.field == "Nodes"


def test_parse_quorum_status_accepts_crlf() -> None:
    text = _quorum_block().replace("\n", "\r\n")

    assert parse_quorum_status(text.encode()).node_id == 1


def test_parse_vote_tally_two_node(sample) -> None:
    votes = parse_vote_tally(sample("quorumtool_two_node.txt"))

    assert votes.expected_votes == 2
    assert votes.highest_expected == 2
    assert votes.total_votes == 2
    assert votes.quorum == 1
    assert votes.flags == ("2Node", "Quorate", "WaitForAll")


def test_parse_vote_tally_inquorate_activity_blocked(sample) -> None:
    votes = parse_vote_tally(sample("quorumtool_single_node.txt"))

    assert votes.expected_votes == 3
    assert votes.highest_expected == 3
    assert votes.total_votes == 1
    assert votes.quorum == 2
    assert votes.flags == ()


def test_single_flag_is_a_one_element_sequence() -> None:
    votes = parse_vote_tally(_vote_block(flags="Quorate"))

    assert votes.flags == ("Quorate",)


def test_vote_block_missing_is_grammar_error() -> None:
    with pytest.raises(ParseGrammarError) as excinfo:
        parse_vote_tally(_quorum_block())

    assert excinfo.value.section == "votequorum"


def test_vote_field_error_names_the_field() -> None:
    with pytest.raises(ParseFieldError) as excinfo:
        parse_vote_tally(_vote_block(expected="two"))

    assert excinfo.value.field == "Expected votes"


def test_count_links_classifies_each_character() -> None:
    counts = count_links("31?n2")

    assert counts == LinkCounts(active=1, connected=1, enabled=1, unknown=1, undefined=0)


def test_count_links_buckets_unknown_codes() -> None:
    counts = count_links("nx3Z")

    assert counts.active == 1
    assert counts.undefined == 2


def test_parse_link_statuses_total_excludes_local_node() -> None:
    output = "LINK ID 0 udp\n\taddr\t= 10.0.0.1\n\tstatus\t= 31?n2\n"

    (link,) = parse_link_statuses(output)

    assert link.ring_id == 0
    assert link.protocol == "udp"
    assert link.address == "10.0.0.1"
    assert link.status == "31?n2"
    assert link.counts.unknown == 1
    assert link.total == 4


def test_parse_link_statuses_preserves_order(sample) -> None:
    links = parse_link_statuses(sample("cfgtool_two_node.txt"))

    assert [link.ring_id for link in links] == [0, 1]
    assert [link.address for link in links] == ["192.168.122.11", "10.0.0.11"]
    assert links[0].counts == LinkCounts(active=1)
    assert links[1].counts == LinkCounts(connected=1)
    assert [link.total for link in links] == [1, 1]


@pytest.mark.parametrize("output", [b"", b"Local node ID 3, transport knet\n", b"garbage\n"])
def test_parse_link_statuses_without_links(output: bytes) -> None:
    assert parse_link_statuses(output) == ()


def test_parse_link_statuses_rejects_oversized_link_id() -> None:
    output = f"LINK ID {2**64} knet\n\taddr\t= 10.0.0.1\n\tstatus\t= n3\n"

    with pytest.raises(ParseFieldError) as excinfo:
        parse_link_statuses(output)

    assert excinfo.value.field == "LINK ID"


def test_parse_link_statuses_keeps_link_with_spaced_status() -> None:
    output = (
        "LINK ID 0 udp\n\taddr\t= 10.0.0.1\n\tstatus\t= n3 3\n"
        "LINK ID 1 udp\n\taddr\t= 10.0.0.2\n\tstatus\t= n2\n"
    )

    links = parse_link_statuses(output)

    assert [link.ring_id for link in links] == [0, 1]
    assert links[0].status == "n3 3"
    assert links[0].counts == LinkCounts(active=2, undefined=1)
    assert links[0].total == 3
    assert links[1].counts == LinkCounts(connected=1)
