# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""corosync-probe CLI package exports."""

from __future__ import annotations

from typing import Final

from .app import app, main

__all__: Final[list[str]] = ["app", "main"]
