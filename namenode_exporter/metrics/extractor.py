"""Bean extractor — one fetch-parse-map pass over the NameNode JMX document."""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from typing import Any

import httpx

from namenode_exporter.metrics.mapping import (
    FIELD_MAPPINGS,
    CoercionError,
    FieldMapping,
    mappings_by_bean,
)
from namenode_exporter.metrics.registry import MetricRegistry

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """A scrape cycle was aborted before any gauge was touched."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class TransportError(FetchError):
    """The upstream endpoint could not be reached or answered non-2xx."""


class DecodeError(FetchError):
    """The response body was not valid JSON."""


class ShapeError(FetchError):
    """The JSON document has no top-level ``beans`` list."""


_MISSING = object()


def resolve_path(bean: dict[str, Any], path: tuple[str, ...]) -> Any:
    """Walk *path* through nested mappings, returning ``_MISSING`` on any miss."""
    node: Any = bean
    for key in path:
        if not isinstance(node, dict) or key not in node:
            return _MISSING
        node = node[key]
    return node


class BeanExtractor:
    """Fetches the JMX document and updates gauges from the mapping table."""

    def __init__(
        self,
        url: str,
        registry: MetricRegistry,
        table: tuple[FieldMapping, ...] | list[FieldMapping] = FIELD_MAPPINGS,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.url = url
        self._registry = registry
        self._by_bean = mappings_by_bean(table)
        self._timeout = timeout
        self._transport = transport
        self._lock = threading.Lock()

        self.last_scrape: datetime | None = None
        self.last_success: bool | None = None
        self.last_error: str = ""

    # ── Cycle ────────────────────────────────────────────────────────

    def refresh(self) -> None:
        """Run one cycle. Raises a ``FetchError`` subclass if it aborts."""
        with self._lock:
            beans = self._parse(self._fetch())
            with self._registry.update():
                for index, bean in enumerate(beans):
                    self._apply(index, bean)

    def scrape(self) -> bool:
        """Refresh for a pull request; failures are logged, never raised."""
        try:
            self.refresh()
        except FetchError as exc:
            logger.warning("Scrape failed (%s): %s", type(exc).__name__, exc)
            self._record(False, str(exc))
            return False
        self._record(True, "")
        return True

    def status(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "last_scrape": self.last_scrape.isoformat() if self.last_scrape else None,
            "last_success": self.last_success,
            "last_error": self.last_error,
        }

    # ── Steps ────────────────────────────────────────────────────────

    def _fetch(self) -> bytes:
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                resp = client.get(self.url)
                resp.raise_for_status()
                return resp.content
        except httpx.HTTPStatusError as exc:
            raise TransportError(self.url, f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise TransportError(self.url, str(exc) or type(exc).__name__) from exc

    def _parse(self, body: bytes) -> list[Any]:
        try:
            document = json.loads(body)
        except ValueError as exc:
            raise DecodeError(self.url, f"invalid JSON: {exc}") from exc

        if not isinstance(document, dict):
            raise ShapeError(self.url, "top-level JSON value is not an object")
        beans = document.get("beans")
        if not isinstance(beans, list):
            raise ShapeError(self.url, "missing 'beans' list")
        return beans

    def _apply(self, index: int, bean: Any) -> None:
        if not isinstance(bean, dict):
            logger.debug("Skipping bean #%d: not an object", index)
            return
        name = bean.get("name")
        if not isinstance(name, str):
            logger.debug("Skipping bean #%d: no 'name' string", index)
            return

        for entry in self._by_bean.get(name, ()):
            value = resolve_path(bean, entry.path)
            if value is _MISSING:
                logger.debug("%s: field %s missing", name, ".".join(entry.path))
                continue
            try:
                coerced = entry.coerce(value)
            except CoercionError as exc:
                logger.debug("%s: field %s skipped: %s",
                             name, ".".join(entry.path), exc)
                continue
            self._registry.set(self._registry.get(entry.full_name), coerced)

    def _record(self, success: bool, error: str) -> None:
        self.last_scrape = datetime.now(timezone.utc)
        self.last_success = success
        self.last_error = error
