"""FastAPI app exposing the gauges to a Prometheus scraper."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Response
from fastapi.responses import HTMLResponse
from prometheus_client import CONTENT_TYPE_LATEST

from namenode_exporter import __version__
from namenode_exporter.metrics.extractor import BeanExtractor
from namenode_exporter.metrics.registry import MetricRegistry

LANDING_PAGE = """<html>
<head><title>NameNode Exporter</title></head>
<body>
<h1>NameNode Exporter</h1>
<p><a href="{path}">Metrics</a></p>
</body>
</html>
"""


def create_api_app(extractor: BeanExtractor, registry: MetricRegistry,
                   telemetry_path: str = "/metrics") -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="NameNode Exporter",
        description="Prometheus exporter for HDFS NameNode JMX metrics",
        version=__version__,
    )

    # Sync handlers run in the threadpool; the upstream fetch blocks.
    def metrics() -> Response:
        extractor.scrape()
        return Response(
            content=registry.render(),
            media_type=CONTENT_TYPE_LATEST,
        )

    app.add_api_route(telemetry_path, metrics, methods=["GET"])

    @app.get("/", response_class=HTMLResponse)
    def index() -> str:
        return LANDING_PAGE.format(path=telemetry_path)

    @app.get("/health")
    def health() -> dict[str, Any]:
        return {
            "status": "ok",
            "metrics": len(registry),
            "upstream": extractor.status(),
        }

    return app
