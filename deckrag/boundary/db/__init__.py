"""Relational metadata store."""

from deckrag.boundary.db.base import Base
from deckrag.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)

__all__ = ["Base", "get_async_db", "get_async_engine", "get_async_session_factory"]
