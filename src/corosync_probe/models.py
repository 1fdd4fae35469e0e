# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typed status snapshot assembled from Corosync diagnostic output."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, computed_field

FieldValue = bool | int | str


class QuorumStatus(BaseModel):
    """Overall quorum state reported by ``corosync-quorumtool``."""

    model_config = ConfigDict(frozen=True)

    node_id: NonNegativeInt
    ring_id: str
    is_quorate: bool
    total_nodes: NonNegativeInt


class VoteTally(BaseModel):
    """Votequorum bookkeeping reported by ``corosync-quorumtool``."""

    model_config = ConfigDict(frozen=True)

    expected_votes: NonNegativeInt
    highest_expected: NonNegativeInt
    total_votes: NonNegativeInt
    quorum: NonNegativeInt
    flags: tuple[str, ...] = ()


class LinkCounts(BaseModel):
    """Number of peers per health category on a single link."""

    model_config = ConfigDict(frozen=True)

    active: NonNegativeInt = 0
    connected: NonNegativeInt = 0
    enabled: NonNegativeInt = 0
    unknown: NonNegativeInt = 0
    undefined: NonNegativeInt = 0


class RingLinkStatus(BaseModel):
    """Status of one communication link reported by ``corosync-cfgtool``."""

    model_config = ConfigDict(frozen=True)

    ring_id: int = Field(ge=0, lt=2**64)
    protocol: str
    address: str
    status: str
    counts: LinkCounts

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total(self) -> int:
        """Return the number of peers on the link, excluding the local node."""

        return max(len(self.status) - 1, 0)


class NodeSnapshot(BaseModel):
    """Everything collected from the local node during one cycle."""

    model_config = ConfigDict(frozen=True)

    quorum: QuorumStatus
    votes: VoteTally
    links: tuple[RingLinkStatus, ...] = ()


class MetricPoint(BaseModel):
    """A single measurement handed to a metric sink."""

    model_config = ConfigDict(frozen=True)

    measurement: str
    fields: dict[str, FieldValue]
    tags: dict[str, str] = Field(default_factory=dict)
    kind: Literal["gauge"] = "gauge"


__all__ = [
    "FieldValue",
    "LinkCounts",
    "MetricPoint",
    "NodeSnapshot",
    "QuorumStatus",
    "RingLinkStatus",
    "VoteTally",
]
