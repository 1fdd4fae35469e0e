# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parser for ``corosync-cfgtool -sb`` link status output."""

from __future__ import annotations

import re
from typing import Final

from ..models import LinkCounts, RingLinkStatus
from .base import UINT64_BITS, decode_output, parse_uint

LINK_PATTERN = re.compile(
    r"^LINK ID (?P<id>\d+) (?P<proto>\w+)[ \t]*\n"
    r"[ \t]+addr[ \t]*=[ \t]*(?P<address>[^\n]+?)[ \t]*\n"
    r"[ \t]+status[ \t]*=[ \t]*(?P<status>[^\n]*?\S)[ \t]*$",
    re.MULTILINE,
)

# Peer state codes printed by ``corosync-cfgtool -b``.
STATUS_ACTIVE: Final[str] = "3"
STATUS_CONNECTED: Final[str] = "2"
STATUS_ENABLED: Final[str] = "1"
STATUS_UNKNOWN: Final[str] = "?"
STATUS_LOCALHOST: Final[str] = "n"

_STATUS_BUCKETS: Final[dict[str, str]] = {
    STATUS_ACTIVE: "active",
    STATUS_CONNECTED: "connected",
    STATUS_ENABLED: "enabled",
    STATUS_UNKNOWN: "unknown",
}


def count_links(status: str) -> LinkCounts:
    """Tally peers on a link by their state code, skipping the local node.

    Unrecognised codes are counted as ``undefined`` rather than rejected.

    Args:
        status: Brief status string such as ``"n33"``.

    Returns:
        LinkCounts: Per-category peer counts.
    """

    tally = dict.fromkeys(LinkCounts.model_fields, 0)
    for char in status:
        if char == STATUS_LOCALHOST:
            continue
        tally[_STATUS_BUCKETS.get(char, "undefined")] += 1
    return LinkCounts(**tally)


def parse_link_statuses(output: bytes | str) -> tuple[RingLinkStatus, ...]:
    """Parse every ``LINK ID`` block in order of appearance.

    Args:
        output: Combined output of ``corosync-cfgtool -sb``.

    Returns:
        tuple[RingLinkStatus, ...]: One entry per link; empty when the node
        reports no links.

    Raises:
        ParseFieldError: If a link id does not fit an unsigned 64-bit integer.
    """

    links: list[RingLinkStatus] = []
    for match in LINK_PATTERN.finditer(decode_output(output)):
        status = match.group("status")
        links.append(
            RingLinkStatus(
                ring_id=parse_uint(match.group("id"), "LINK ID", bits=UINT64_BITS),
                protocol=match.group("proto"),
                address=match.group("address"),
                status=status,
                counts=count_links(status),
            ),
        )
    return tuple(links)


__all__ = ["LINK_PATTERN", "count_links", "parse_link_statuses"]
