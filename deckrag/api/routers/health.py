"""
Health check API endpoints.

Routes: GET /health, GET /health/db, GET /health/vector-store

Dependencies: deckrag.boundary, deckrag.api.deps
System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from deckrag.api.deps import get_chunk_store
from deckrag.boundary.db import get_async_db

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/db", response_model=HealthResponse)
async def health_check_db(db: AsyncSession = Depends(get_async_db)) -> HealthResponse:
    """Database health check."""
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.exception(f"{__name__}:health_check_db - Database unreachable")
        raise HTTPException(status_code=503, detail=f"Database unavailable: {e}")
    return HealthResponse(status="healthy", message="Database connection OK")


@router.get("/vector-store", response_model=HealthResponse)
async def health_check_vector_store(chunk_store=Depends(get_chunk_store)) -> HealthResponse:
    """Vector store health check; initializes the chunk index if needed."""
    try:
        await chunk_store.ensure_ready()
    except Exception as e:
        logger.exception(f"{__name__}:health_check_vector_store - Vector index unreachable")
        raise HTTPException(status_code=503, detail=f"Vector store unavailable: {e}")
    return HealthResponse(status="healthy", message="Vector store accessible")
