"""Metric extraction — JMX beans mapped onto Prometheus gauges."""

from __future__ import annotations

from namenode_exporter.metrics.extractor import (
    BeanExtractor,
    DecodeError,
    FetchError,
    ShapeError,
    TransportError,
)
from namenode_exporter.metrics.mapping import FIELD_MAPPINGS, FieldMapping
from namenode_exporter.metrics.registry import (
    DuplicateMetricError,
    MetricRegistry,
    build_registry,
)

__all__ = [
    "BeanExtractor",
    "DecodeError",
    "DuplicateMetricError",
    "FIELD_MAPPINGS",
    "FetchError",
    "FieldMapping",
    "MetricRegistry",
    "ShapeError",
    "TransportError",
    "build_registry",
]
