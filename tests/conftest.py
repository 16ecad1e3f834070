"""Shared test fixtures."""

from __future__ import annotations

import copy
import json
from typing import Any, Callable

import httpx
import pytest

from namenode_exporter.metrics.extractor import BeanExtractor
from namenode_exporter.metrics.mapping import FIELD_MAPPINGS
from namenode_exporter.metrics.registry import MetricRegistry, build_registry

JMX_URL = "http://namenode.test:50070/jmx"

FSNAMESYSTEM_BEAN: dict[str, Any] = {
    "name": "Hadoop:service=NameNode,name=FSNamesystem",
    "modelerType": "FSNamesystem",
    "tag.Context": "dfs",
    "tag.HAState": "active",
    "tag.TotalSyncTimes": "23 6 ",
    "MissingBlocks": 0,
    "CapacityTotal": 307099828224,
    "CapacityTotalGB": 286.0,
    "CapacityUsed": 1471291392,
    "CapacityRemaining": 279994568704,
    "CapacityUsedNonDFS": 25633968128,
    "TotalLoad": 6,
    "BlocksTotal": 67,
    "FilesTotal": 184,
    "UnderReplicatedBlocks": 2,
    "CorruptBlocks": 1,
    "ExcessBlocks": 0,
    "StaleDataNodes": 3,
}

NAMENODE_STATUS_BEAN: dict[str, Any] = {
    "name": "Hadoop:service=NameNode,name=NameNodeStatus",
    "modelerType": "org.apache.hadoop.hdfs.server.namenode.NameNode",
    "SecurityEnabled": False,
    "NNRole": "NameNode",
    "HostAndPort": "namenode1.hdfs.example:50071",
    "LastHATransitionTime": 1484149009998,
    "State": "active",
}

MEMORY_BEAN: dict[str, Any] = {
    "name": "java.lang:type=Memory",
    "modelerType": "sun.management.MemoryImpl",
    "HeapMemoryUsage": {
        "committed": 1060372480,
        "init": 1073741824,
        "max": 1060372480,
        "used": 124571464,
    },
    "NonHeapMemoryUsage": {"committed": 1, "init": 2, "max": -1, "used": 3},
}

PARNEW_BEAN: dict[str, Any] = {
    "name": "java.lang:type=GarbageCollector,name=ParNew",
    "CollectionCount": 42,
    "CollectionTime": 1234,
}

CMS_BEAN: dict[str, Any] = {
    "name": "java.lang:type=GarbageCollector,name=ConcurrentMarkSweep",
    "CollectionCount": 2,
    "CollectionTime": 87,
}

CODE_CACHE_BEAN: dict[str, Any] = {
    "name": "java.lang:type=MemoryPool,name=Code Cache",
    "Usage": {"committed": 5, "used": 4},
}




JMXDocument = Callable[..., dict[str, Any]]
TransportFactory = Callable[..., httpx.MockTransport]


@pytest.fixture
def jmx_url() -> str:
    return JMX_URL


@pytest.fixture
def fsnamesystem_bean() -> dict[str, Any]:
    return copy.deepcopy(FSNAMESYSTEM_BEAN)


@pytest.fixture
def namenode_status_bean() -> dict[str, Any]:
    return copy.deepcopy(NAMENODE_STATUS_BEAN)


@pytest.fixture
def memory_bean() -> dict[str, Any]:
    return copy.deepcopy(MEMORY_BEAN)


@pytest.fixture
def parnew_bean() -> dict[str, Any]:
    return copy.deepcopy(PARNEW_BEAN)


@pytest.fixture
def cms_bean() -> dict[str, Any]:
    return copy.deepcopy(CMS_BEAN)


@pytest.fixture
def jmx_document() -> JMXDocument:
    """Wrap beans into the ``{"beans": [...]}`` envelope."""
    def _document(*beans: Any) -> dict[str, Any]:
        return {"beans": list(beans)}
    return _document


@pytest.fixture
def full_document(jmx_document: JMXDocument) -> dict[str, Any]:
    return copy.deepcopy(jmx_document(
        CODE_CACHE_BEAN,
        FSNAMESYSTEM_BEAN,
        NAMENODE_STATUS_BEAN,
        MEMORY_BEAN,
        PARNEW_BEAN,
        CMS_BEAN,
    ))


@pytest.fixture
def json_transport() -> TransportFactory:
    """Build a transport answering every request with *payload*.

    bytes and str payloads are sent as-is, anything else is JSON-encoded.
    """
    def _transport(payload: Any, status_code: int = 200) -> httpx.MockTransport:
        body = payload if isinstance(payload, (bytes, str)) else json.dumps(payload)

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, content=body)

        return httpx.MockTransport(handler)
    return _transport


@pytest.fixture
def registry() -> MetricRegistry:
    return build_registry(FIELD_MAPPINGS)


@pytest.fixture
def make_extractor(
    registry: MetricRegistry,
) -> Callable[[httpx.BaseTransport], BeanExtractor]:
    def _make(transport: httpx.BaseTransport) -> BeanExtractor:
        return BeanExtractor(JMX_URL, registry, FIELD_MAPPINGS,
                             timeout=1.0, transport=transport)
    return _make


@pytest.fixture
def gauge_values(registry: MetricRegistry) -> Callable[[], dict[str, float]]:
    """Current gauge values of the shared registry, keyed by name."""
    def _values() -> dict[str, float]:
        return {snap.name: snap.value for snap in registry.snapshot()}
    return _values
