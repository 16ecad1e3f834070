"""Gauge registry backed by a private Prometheus collector registry."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterable, Iterator, NamedTuple

from prometheus_client import CollectorRegistry, Gauge, generate_latest

from namenode_exporter.metrics.mapping import FieldMapping


class DuplicateMetricError(ValueError):
    """A gauge name was declared twice."""


class GaugeSnapshot(NamedTuple):
    name: str
    help: str
    value: float


class MetricRegistry:
    """Owns the exporter's gauges and renders their current values.

    Gauges are declared once at startup and only their values change
    afterwards. A whole update cycle runs inside ``update()``, and
    ``snapshot()``/``render()`` take the same lock, so readers see either
    every value of a cycle or none of them.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.collector_registry = registry or CollectorRegistry()
        self._gauges: dict[str, Gauge] = {}
        self._help: dict[str, str] = {}
        # Reentrant: set() is called both inside and outside update()
        self._lock = threading.RLock()

    def declare(self, name: str, help: str) -> Gauge:
        if name in self._gauges:
            raise DuplicateMetricError(f"Metric '{name}' is already declared")
        gauge = Gauge(name, help, registry=self.collector_registry)
        self._gauges[name] = gauge
        self._help[name] = help
        return gauge

    @contextmanager
    def update(self) -> Iterator[MetricRegistry]:
        """Hold the registry lock across a batch of ``set`` calls."""
        with self._lock:
            yield self

    def set(self, gauge: Gauge, value: float) -> None:
        with self._lock:
            gauge.set(value)

    def get(self, name: str) -> Gauge:
        return self._gauges[name]

    def snapshot(self) -> list[GaugeSnapshot]:
        """Current (name, help, value) of every gauge, in declaration order."""
        values: dict[str, float] = {}
        with self._lock:
            for family in self.collector_registry.collect():
                for sample in family.samples:
                    values[sample.name] = sample.value
        return [
            GaugeSnapshot(name, self._help[name], values.get(name, 0.0))
            for name in self._gauges
        ]

    def render(self) -> bytes:
        """Text exposition of every gauge."""
        with self._lock:
            return generate_latest(self.collector_registry)

    def __len__(self) -> int:
        return len(self._gauges)

    def __contains__(self, name: object) -> bool:
        return name in self._gauges


def build_registry(
    table: Iterable[FieldMapping],
    registry: CollectorRegistry | None = None,
) -> MetricRegistry:
    """Declare one gauge per mapping table entry."""
    metrics = MetricRegistry(registry)
    for entry in table:
        metrics.declare(entry.full_name, entry.description)
    return metrics
