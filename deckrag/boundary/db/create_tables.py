"""
Create all tables for the document metadata store.

Dependencies: sqlalchemy, deckrag.boundary.db
System role: Schema bootstrap for development databases

Usage:
    python -m deckrag.boundary.db.create_tables
"""

import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from deckrag.boundary.db.base import Base
from deckrag.boundary.db.connection import get_async_engine
from deckrag.boundary.db import models  # noqa: F401  registers ORM tables

logger = logging.getLogger(__name__)


async def create_tables(engine: AsyncEngine | None = None) -> None:
    """
    Create every ORM table that does not exist yet.

    Args:
        engine: Engine to use (defaults to the application engine)
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"{__name__}:create_tables - Tables created", extra={"tables": list(Base.metadata.tables)})


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(create_tables())
