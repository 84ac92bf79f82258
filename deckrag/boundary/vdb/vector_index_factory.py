"""
Vector index factory for selecting between the local (dev) and pgvector (prod) backends.

Depends on VECTOR_STORE_STORE_TYPE environment variable.

Dependencies: deckrag.boundary.vdb, deckrag.configs
System role: Vector index instantiation and selection
"""

import logging

from deckrag.boundary.vdb.base import VectorIndex
from deckrag.configs import Settings, get_settings

logger = logging.getLogger(__name__)


def get_vector_index(settings: Settings | None = None) -> VectorIndex:
    """
    Factory function to get vector index based on environment configuration.

    Returns:
        VectorIndex: LocalVectorIndex or PgVectorIndex

    Raises:
        ValueError: If the store type is invalid
    """
    settings = settings or get_settings()
    store_type = settings.vector_store.store_type.lower()

    if store_type == "local":
        from deckrag.boundary.vdb.local_index import LocalVectorIndex

        logger.info(f"{__name__}:get_vector_index - Creating local vector index (dev mode)")
        return LocalVectorIndex(persist_path=settings.vector_store.local_persist_path)

    elif store_type == "pgvector":
        from deckrag.boundary.db.connection import build_async_engine
        from deckrag.boundary.vdb.pgvector_index import PgVectorIndex

        logger.info(f"{__name__}:get_vector_index - Creating pgvector index (production mode)")
        return PgVectorIndex(build_async_engine(settings.database))

    else:
        raise ValueError(
            f"Invalid vector store type: {store_type}. "
            f"Must be 'local' (dev) or 'pgvector' (production)."
        )
