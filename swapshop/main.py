"""
FastAPI application entry point.
Mounts routes, exception handlers and Prometheus metrics; startup seeds
categories and ensures the Elasticsearch index.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from swapshop.api.v1.router import api_router
from swapshop.config import get_settings
from swapshop.core.exception_handlers import register_exception_handlers
from swapshop.core.logging import setup_logging
from swapshop.db.session import async_session_maker
from swapshop.search.elasticsearch_client import ensure_items_index
from swapshop.services.category_service import CategoryService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: seed default categories, ensure the search index when ES is reachable."""
    settings = get_settings()
    try:
        async with async_session_maker() as session:
            await CategoryService(session).seed_defaults()
    except Exception as e:
        # Schema may not be migrated yet; the API still starts
        logger.warning("category seeding skipped: %s", e)
    if settings.search_indexing_enabled:
        try:
            await ensure_items_index()
        except Exception as e:
            # Search returns empty results while ES is down
            logger.warning("Elasticsearch unavailable at startup: %s", e)
    yield


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)
    app = FastAPI(
        title=settings.app_name,
        description="Clothing swap marketplace: listings, item swaps and points redemptions.",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Prometheus metrics at /metrics
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()
