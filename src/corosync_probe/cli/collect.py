# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI commands running collection cycles once or behind a Prometheus endpoint."""

from __future__ import annotations

import json
import threading
from typing import Annotated

import typer
from prometheus_client import CollectorRegistry, start_http_server
from rich import box
from rich.table import Table

from ..collector import CorosyncCollector
from ..config import ProbeConfig
from ..errors import CorosyncProbeError
from ..logging import fail, get_console, info
from ..metrics import PointRecorder, PrometheusCollector
from ..models import MetricPoint
from .shared import CLIState, ConfigOption, SudoOption, get_state, load_cli_config


def _build_collector(state: CLIState, config: ProbeConfig) -> CorosyncCollector:
    try:
        return CorosyncCollector.from_config(config)
    except CorosyncProbeError as exc:
        fail(str(exc), use_emoji=state.use_emoji, use_color=state.use_color)
        raise typer.Exit(code=1) from exc


def _format_fields(point: MetricPoint) -> str:
    return "\n".join(f"{key}={value}" for key, value in point.fields.items())


def _render_points(points: list[MetricPoint], state: CLIState) -> None:
    table = Table(title="Corosync metrics", box=box.SIMPLE, expand=True)
    table.add_column("Measurement", style="bold", overflow="fold")
    table.add_column("Tags", overflow="fold")
    table.add_column("Fields", overflow="fold")
    for point in points:
        tags = ", ".join(f"{key}={value}" for key, value in point.tags.items())
        table.add_row(point.measurement, tags, _format_fields(point))
    get_console(color=state.use_color, emoji=state.use_emoji).print(table)


def collect_command(
    ctx: typer.Context,
    config_path: ConfigOption = None,
    sudo: SudoOption = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the snapshot and points as JSON.")] = False,
) -> None:
    """Run one collection cycle and print the resulting metric points."""

    state = get_state(ctx)
    config = load_cli_config(state, config_path, {"use_sudo": sudo})
    collector = _build_collector(state, config)
    recorder = PointRecorder()
    try:
        snapshot = collector.collect(recorder)
    except CorosyncProbeError as exc:
        fail(str(exc), use_emoji=state.use_emoji, use_color=state.use_color)
        raise typer.Exit(code=1) from exc

    if as_json:
        payload = {
            "snapshot": snapshot.model_dump(mode="json"),
            "points": [point.model_dump(mode="json") for point in recorder.points],
        }
        typer.echo(json.dumps(payload, indent=2))
        return
    _render_points(recorder.points, state)


def _wait_forever() -> None:
    threading.Event().wait()


def serve_command(
    ctx: typer.Context,
    config_path: ConfigOption = None,
    sudo: SudoOption = None,
    address: Annotated[str | None, typer.Option("--address", help="Listen address for /metrics.")] = None,
    port: Annotated[int | None, typer.Option("--port", "-p", help="Listen port for /metrics.")] = None,
) -> None:
    """Serve Prometheus metrics, running one collection cycle per scrape."""

    state = get_state(ctx)
    exporter = {key: value for key, value in (("listen_address", address), ("port", port)) if value is not None}
    config = load_cli_config(state, config_path, {"use_sudo": sudo, "exporter": exporter or None})
    collector = _build_collector(state, config)

    registry = CollectorRegistry(auto_describe=False)
    registry.register(PrometheusCollector(collector))
    start_http_server(config.exporter.port, addr=config.exporter.listen_address, registry=registry)
    info(
        f"Serving Corosync metrics on http://{config.exporter.listen_address}:{config.exporter.port}/metrics",
        use_emoji=state.use_emoji,
        use_color=state.use_color,
    )
    try:
        _wait_forever()
    except KeyboardInterrupt:
        raise typer.Exit(code=0) from None


__all__ = ["collect_command", "serve_command"]
