# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared parser infrastructure and helper utilities."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

from ..errors import ParseFieldError, ParseGrammarError

UINT32_BITS: Final[int] = 32
UINT64_BITS: Final[int] = 64


@dataclass(frozen=True, slots=True)
class LabelledField:
    """One ``Label: value`` line of a labelled block.

    Attributes:
        label: Label text exactly as printed by the tool.
        group: Name of the capture group holding the value.
        value: Regular expression matching the value text.
        suffix: Optional pattern for trailing text printed after the value.
    """

    label: str
    group: str
    value: str = r"\S+"
    suffix: str = ""

    def pattern(self) -> str:
        """Return the regular expression matching the whole line."""

        return rf"^{re.escape(self.label)}:[ \t]*(?P<{self.group}>{self.value}){self.suffix}[ \t]*$"


def labelled_block(fields: Sequence[LabelledField]) -> re.Pattern[str]:
    """Compile a pattern requiring ``fields`` on consecutive lines, in order.

    Args:
        fields: Ordered line descriptions making up the block.

    Returns:
        re.Pattern[str]: Multiline pattern matching the contiguous block.
    """

    return re.compile("\n".join(field.pattern() for field in fields), re.MULTILINE)


def decode_output(output: bytes | str) -> str:
    """Return tool output as text with normalised line endings."""

    text = output if isinstance(output, str) else output.decode("utf-8", errors="replace")
    return text.replace("\r\n", "\n")


def search_block(pattern: re.Pattern[str], text: str, *, section: str) -> re.Match[str]:
    """Return the first match of ``pattern`` in ``text``.

    Args:
        pattern: Compiled block pattern.
        text: Decoded tool output.
        section: Block name reported when nothing matches.

    Returns:
        re.Match[str]: Match object exposing the named groups.

    Raises:
        ParseGrammarError: If the block is absent.
    """

    match = pattern.search(text)
    if match is None:
        raise ParseGrammarError(section)
    return match


def parse_uint(value: str, field: str, *, bits: int = UINT32_BITS) -> int:
    """Convert ``value`` to an unsigned integer that fits in ``bits`` bits.

    Args:
        value: Raw text captured for the field.
        field: Field label used in error messages.
        bits: Width of the unsigned integer type.

    Returns:
        int: Parsed value.

    Raises:
        ParseFieldError: If ``value`` is not a decimal number in range.
    """

    expected = f"an unsigned {bits}-bit integer"
    if not value.isascii() or not value.isdigit():
        raise ParseFieldError(field, value, expected=expected)
    number = int(value)
    if number >= 1 << bits:
        raise ParseFieldError(field, value, expected=expected)
    return number


__all__ = [
    "UINT32_BITS",
    "UINT64_BITS",
    "LabelledField",
    "decode_output",
    "labelled_block",
    "parse_uint",
    "search_block",
]
