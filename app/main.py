from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _report_configuration() -> None:
    """
    Log which upstream sources have credentials; missing ones degrade to search links.
    """

    from app.config import get_discogs_settings, get_ebay_settings, get_snapshot_settings

    if get_discogs_settings().token:
        logger.info("Discogs API token configured")
    else:
        logger.warning("No DISCOGS_TOKEN found - using search links only")

    ebay = get_ebay_settings()
    if ebay.has_credentials:
        logger.info("eBay API configured (%s mode)", ebay.mode)
    else:
        logger.warning("No eBay credentials found - using search links only")

    logger.info("Result snapshot path=%s", get_snapshot_settings().snapshot_path)


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Report source configuration on boot."""
    _report_configuration()
    yield
    logger.info("Vinyl search API shut down")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _configure_logging()

    application = FastAPI(
        title="Vinyl Search API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers.results_router import router as results_router
    from app.api.routers.search_router import router as search_router

    application.include_router(search_router)
    application.include_router(results_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return application


app = create_app()
