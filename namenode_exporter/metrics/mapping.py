"""Field mapping table — which bean fields feed which gauges."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable

NAMESPACE = "namenode"

FSNAMESYSTEM = "Hadoop:service=NameNode,name=FSNamesystem"
NAMENODE_STATUS = "Hadoop:service=NameNode,name=NameNodeStatus"
GC_PARNEW = "java.lang:type=GarbageCollector,name=ParNew"
GC_CMS = "java.lang:type=GarbageCollector,name=ConcurrentMarkSweep"
MEMORY = "java.lang:type=Memory"

ACTIVE_STATE = "active"


class CoercionError(ValueError):
    """A bean field held a value of the wrong kind for its mapping."""


def numeric(value: Any) -> float:
    """Pass a JSON number through as a float."""
    # bool is an int subclass; JSON true/false is not a number here
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CoercionError(f"expected a number, got {type(value).__name__}")
    try:
        result = float(value)
    except OverflowError as exc:
        raise CoercionError(f"{type(value).__name__} too large for a float") from exc
    if not math.isfinite(result):
        raise CoercionError(f"non-finite value {value!r}")
    return result


def active_flag(value: Any) -> float:
    """1.0 when the HA state string is ``active``, 0.0 for any other string."""
    if not isinstance(value, str):
        raise CoercionError(f"expected a string, got {type(value).__name__}")
    return 1.0 if value == ACTIVE_STATE else 0.0


Coercion = Callable[[Any], float]


@dataclass(frozen=True)
class FieldMapping:
    """One bean field (possibly nested) feeding one gauge."""
    bean: str
    path: tuple[str, ...]
    metric: str
    help: str = ""
    coerce: Coercion = numeric

    @property
    def full_name(self) -> str:
        return f"{NAMESPACE}_{self.metric}"

    @property
    def description(self) -> str:
        return self.help or self.metric


def _fsn(field: str) -> FieldMapping:
    return FieldMapping(FSNAMESYSTEM, (field,), field)


def _gc(bean: str, collector: str) -> list[FieldMapping]:
    return [
        FieldMapping(bean, ("CollectionCount",), f"{collector}_CollectionCount",
                     help=f"{collector} GC Count"),
        FieldMapping(bean, ("CollectionTime",), f"{collector}_CollectionTime",
                     help=f"{collector} GC Time"),
    ]


def _heap(field: str) -> FieldMapping:
    metric = f"heapMemoryUsage{field.capitalize()}"
    return FieldMapping(MEMORY, ("HeapMemoryUsage", field), metric)


FIELD_MAPPINGS: tuple[FieldMapping, ...] = (
    # ── FSNamesystem ────────────────────────────────────────────────
    *(_fsn(f) for f in (
        "MissingBlocks",
        "UnderReplicatedBlocks",
        "CapacityTotal",
        "CapacityUsed",
        "CapacityRemaining",
        "CapacityUsedNonDFS",
        "BlocksTotal",
        "FilesTotal",
        "CorruptBlocks",
        "ExcessBlocks",
        "StaleDataNodes",
    )),

    # ── GC (only these two collector implementations are tracked) ──
    *_gc(GC_PARNEW, "ParNew"),
    *_gc(GC_CMS, "ConcurrentMarkSweep"),

    # ── Heap ────────────────────────────────────────────────────────
    *(_heap(f) for f in ("committed", "init", "max", "used")),

    # ── HA status ───────────────────────────────────────────────────
    FieldMapping(NAMENODE_STATUS, ("LastHATransitionTime",),
                 "lastHATransitionTime", help="last HA Transition Time"),
    FieldMapping(NAMENODE_STATUS, ("State",), "state",
                 help="Current namenode state, 1 if active 0 if standby",
                 coerce=active_flag),
    # Same information as "state", but FSNamesystem exposes it as its own tag
    FieldMapping(FSNAMESYSTEM, ("tag.HAState",), "isActive",
                 coerce=active_flag),
)


def mappings_by_bean(
    table: tuple[FieldMapping, ...] | list[FieldMapping],
) -> dict[str, list[FieldMapping]]:
    """Group table entries by bean name, preserving table order."""
    grouped: dict[str, list[FieldMapping]] = {}
    for entry in table:
        grouped.setdefault(entry.bean, []).append(entry)
    return grouped
