"""
FastAPI application entry point.
Challenge: Mount routes, middleware (Prometheus), domain error handling, startup/shutdown of clients.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from app.api.v1.router import api_router
from app.cache.redis_client import close_redis
from app.config import get_settings
from app.core.exceptions import DomainError, domain_error_handler
from app.search.elasticsearch_client import close_elasticsearch, ensure_food_index

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: ensure the search index when ES is reachable. Shutdown: close clients."""
    try:
        await ensure_food_index()
    except Exception as e:
        # ES may be down; listing and swaps still work, search returns empty
        logger.warning("Elasticsearch unavailable at startup: %s", e)
    yield
    await close_redis()
    await close_elasticsearch()


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(
        title=settings.app_name,
        description="Food-sharing marketplace: listings, swap requests, chat, ratings and trust scores.",
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

    app.add_exception_handler(DomainError, domain_error_handler)

    # Prometheus metrics at /metrics
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    app.include_router(api_router, prefix="/api")
    return app


app = create_app()
