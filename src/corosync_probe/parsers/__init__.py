# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parsers turning Corosync diagnostic output into typed statuses."""

from __future__ import annotations

from .base import LabelledField, decode_output, labelled_block, parse_uint
from .links import count_links, parse_link_statuses
from .quorum import parse_quorum_status, parse_vote_tally

__all__ = [
    "LabelledField",
    "count_links",
    "decode_output",
    "labelled_block",
    "parse_link_statuses",
    "parse_quorum_status",
    "parse_uint",
    "parse_vote_tally",
]
