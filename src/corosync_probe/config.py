# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models for the Corosync collector."""

from __future__ import annotations

from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigError

CONFIG_SECTION: Final[str] = "corosync"
DEFAULT_EXPORTER_PORT: Final[int] = 9664


class ExporterConfig(BaseModel):
    """Settings for the Prometheus endpoint served by ``corosync-probe serve``."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    listen_address: str = "0.0.0.0"  # nosec B104 - exporters listen on all interfaces by default
    port: int = Field(default=DEFAULT_EXPORTER_PORT, ge=1, le=65535)


class ProbeConfig(BaseModel):
    """Top-level collector configuration.

    ``use_sudo`` defaults to ``True``: both diagnostic tools normally need
    root to talk to the Corosync daemon, so the collector prefixes them with
    ``sudo`` unless told otherwise.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    use_sudo: bool = True
    quorum_tool: str = "corosync-quorumtool"
    cfg_tool: str = "corosync-cfgtool"
    sudo: str = "sudo"
    exporter: ExporterConfig = Field(default_factory=ExporterConfig)

    def to_dict(self) -> dict[str, Any]:
        """Return a plain mapping representation suitable for merging."""

        return self.model_dump(mode="python")


SAMPLE_CONFIG: Final[str] = f"""\
# Gather status of the Corosync Cluster Engine.
[{CONFIG_SECTION}]
## Run corosync-quorumtool and corosync-cfgtool through sudo. Both tools
## need root privileges to query the daemon; the collector user needs a
## NOPASSWD sudoers entry for them, e.g.
##   telegraf ALL=(root) NOPASSWD: /usr/sbin/corosync-quorumtool, /usr/sbin/corosync-cfgtool -sb
use_sudo = true

## Executable names, looked up on PATH at startup.
# quorum_tool = "corosync-quorumtool"
# cfg_tool = "corosync-cfgtool"
# sudo = "sudo"

[{CONFIG_SECTION}.exporter]
## Address and port of the Prometheus endpoint used by `corosync-probe serve`.
listen_address = "0.0.0.0"
port = {DEFAULT_EXPORTER_PORT}
"""


def sample_config() -> str:
    """Return a commented TOML document describing the defaults."""

    return SAMPLE_CONFIG


__all__ = [
    "CONFIG_SECTION",
    "ConfigError",
    "ExporterConfig",
    "ProbeConfig",
    "sample_config",
]
