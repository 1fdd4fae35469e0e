# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Metric sinks receiving the points produced by a collection cycle."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from typing import TYPE_CHECKING, Protocol

from prometheus_client.core import GaugeMetricFamily, Metric
from prometheus_client.registry import Collector

from .errors import CorosyncProbeError
from .models import FieldValue, MetricPoint

if TYPE_CHECKING:
    from .collector import CorosyncCollector

LOGGER = logging.getLogger(__name__)


class MetricSink(Protocol):
    """Receive gauge measurements emitted by the collector."""

    def add_gauge(self, measurement: str, fields: Mapping[str, FieldValue], tags: Mapping[str, str]) -> None:
        """Record one gauge point."""


class PointRecorder:
    """In-memory sink keeping every point in emission order."""

    def __init__(self) -> None:
        self.points: list[MetricPoint] = []

    def add_gauge(self, measurement: str, fields: Mapping[str, FieldValue], tags: Mapping[str, str]) -> None:
        self.points.append(MetricPoint(measurement=measurement, fields=dict(fields), tags=dict(tags)))

    def __len__(self) -> int:
        return len(self.points)


def points_to_families(points: Sequence[MetricPoint]) -> list[GaugeMetricFamily]:
    """Convert points into Prometheus gauge families.

    Each numeric or boolean field becomes ``<measurement>_<field>`` labelled by
    the point tags. String fields become ``<measurement>_<field>_info`` with the
    value carried as an extra label and a constant sample of 1.

    Args:
        points: Points produced by one collection cycle.

    Returns:
        list[GaugeMetricFamily]: Families in first-seen order.
    """

    families: dict[str, GaugeMetricFamily] = {}

    def _family(name: str, labels: Sequence[str]) -> GaugeMetricFamily:
        if name not in families:
            families[name] = GaugeMetricFamily(name, f"Corosync {name.replace('_', ' ')}", labels=list(labels))
        return families[name]

    for point in points:
        label_names = list(point.tags)
        label_values = [point.tags[name] for name in label_names]
        for field, value in point.fields.items():
            if isinstance(value, str):
                family = _family(f"{point.measurement}_{field}_info", [*label_names, field])
                family.add_metric([*label_values, value], 1.0)
            else:
                _family(f"{point.measurement}_{field}", label_names).add_metric(label_values, float(value))
    return list(families.values())


class PrometheusCollector(Collector):
    """Run one collection cycle per scrape and expose the result as gauges."""

    def __init__(self, collector: CorosyncCollector) -> None:
        self._collector = collector

    def collect(self) -> Iterator[Metric]:
        recorder = PointRecorder()
        try:
            self._collector.collect(recorder)
        except CorosyncProbeError:
            LOGGER.exception("corosync collection cycle failed")
            raise
        yield from points_to_families(recorder.points)

    def describe(self) -> list[Metric]:
        # Avoid running the tools when the collector is registered.
        return []


__all__ = ["MetricSink", "PointRecorder", "PrometheusCollector", "points_to_families"]
