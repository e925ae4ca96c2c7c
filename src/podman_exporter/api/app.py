# src/podman_exporter/api/app.py
"""
FastAPI application factory for the metrics endpoint.

Every request, whatever its method or path, runs one collection cycle and returns
the whole metrics registry in the Prometheus text exposition format. The
collector and registry are built once at startup and passed in explicitly.
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse, Response

from podman_exporter import __version__
from podman_exporter.core.collector import Collector
from podman_exporter.core.config import SCRAPE_ERROR_POLICIES, config
from podman_exporter.core.exceptions import CollectorError
from podman_exporter.core.registry import MetricsRegistry

logger = logging.getLogger(__name__)

SCRAPE_METHODS = ["GET", "HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]


def create_app(
    collector: Collector,
    registry: MetricsRegistry,
    error_policy: Optional[str] = None,
    use_lifespan: bool = False,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        collector: The collector run once per request.
        registry: The registry serialized into every response.
        error_policy: 'stale' serves the previous values with
                      exporter_last_scrape_error=1 when collection fails,
                      'fail' answers 503. Defaults to SCRAPE_ERROR_POLICY.
        use_lifespan: If True, close the engine client on shutdown.
                      Set to False for testing.

    Returns:
        A configured FastAPI application instance.
    """
    policy = (error_policy or config.SCRAPE_ERROR_POLICY).lower()
    if policy not in SCRAPE_ERROR_POLICIES:
        raise ValueError(f"Unknown scrape error policy '{policy}'. Use 'stale' or 'fail'.")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Serving metrics from %s", collector.client.describe())
        yield
        await collector.client.close()
        logger.info("Engine client closed.")

    app = FastAPI(
        title="podman-exporter",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan if use_lifespan else None,
    )

    @app.api_route("/{full_path:path}", methods=SCRAPE_METHODS, include_in_schema=False)
    async def scrape(full_path: str):
        """Update the registry from the engine, then serialize it."""
        start_time = time.monotonic()
        try:
            await collector.update()
        except CollectorError as e:
            registry.last_scrape_error.set(1)
            if policy == "fail":
                logger.error("Scrape failed: %s", e)
                return PlainTextResponse(f"Scrape failed: {e}\n", status_code=503)
            logger.error("Scrape failed, serving previous values: %s", e)
        else:
            registry.last_scrape_error.set(0)
        finally:
            registry.scrape_duration_seconds.set(time.monotonic() - start_time)

        return Response(content=registry.exposition(), media_type=registry.content_type)

    return app
