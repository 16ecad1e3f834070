"""Application orchestrator — wires together all components."""

from __future__ import annotations

import logging
from pathlib import Path

import uvicorn
from rich.logging import RichHandler

from namenode_exporter.api.server import create_api_app
from namenode_exporter.config.settings import Settings, load_config
from namenode_exporter.metrics.extractor import BeanExtractor
from namenode_exporter.metrics.mapping import FIELD_MAPPINGS
from namenode_exporter.metrics.registry import build_registry

logger = logging.getLogger(__name__)


class Application:
    """Top-level application orchestrator."""

    def __init__(
        self,
        config_path: str | Path | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or load_config(config_path)
        self.registry = build_registry(FIELD_MAPPINGS)
        self.extractor = BeanExtractor(
            self.settings.namenode.jmx_url,
            self.registry,
            FIELD_MAPPINGS,
            timeout=self.settings.namenode.timeout,
        )
        self.api_app = create_api_app(
            self.extractor, self.registry,
            telemetry_path=self.settings.web.telemetry_path,
        )

    async def start(self) -> None:
        """Serve the exporter until interrupted."""
        self._setup_logging()

        web = self.settings.web
        config = uvicorn.Config(
            self.api_app,
            host=web.host,
            port=web.port,
            log_level="warning",
            log_config=None,
        )
        server = uvicorn.Server(config)
        logger.info("Starting server on %s:%d (scraping %s)",
                    web.host, web.port, self.settings.namenode.jmx_url)
        try:
            await server.serve()
        finally:
            logger.info("Shutdown complete.")

    def _setup_logging(self) -> None:
        level = getattr(logging, self.settings.logging.level)
        handler = RichHandler(show_path=False, rich_tracebacks=True)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logging.root.handlers = [handler]
        logging.root.setLevel(level)

        # Per-request lines from these add noise at every scrape
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
