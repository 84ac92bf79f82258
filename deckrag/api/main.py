"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, deckrag.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from deckrag.api.deps.dependencies import get_service_cache
from deckrag.configs import get_settings
from deckrag.observability.logger import configure_logging
from deckrag.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware
from .routers import documents_router, health_router, rag_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Builds the shared services and initializes the chunk index on startup;
    releases backend connections on shutdown.
    """
    configure_logging(get_settings().log_level)
    logger = logging.getLogger("uvicorn")

    logger.info("Pre-warming service cache...")
    cache = get_service_cache()
    _ = cache.document_pipeline
    _ = cache.retrieval_service
    try:
        await cache.chunk_store.ensure_ready()
    except Exception:
        # first request retries ensure_ready
        logger.exception("Chunk index initialization failed at startup")
    logger.info("Service cache pre-warmed")

    yield

    await cache.aclose()
    logger.info("Service cache cleared")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="deckrag API",
        description="Document ingestion and retrieval for AI slide generation",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(documents_router, prefix="/api/v1")
    app.include_router(rag_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "deckrag.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
