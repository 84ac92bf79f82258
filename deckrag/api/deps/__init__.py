"""FastAPI dependencies."""

from deckrag.api.deps.dependencies import (
    ServiceCache,
    get_chunk_store,
    get_document_service,
    get_document_status_service,
    get_retrieval_service,
    get_service_cache,
    require_presentation,
)

__all__ = [
    "ServiceCache",
    "get_chunk_store",
    "get_document_service",
    "get_document_status_service",
    "get_retrieval_service",
    "get_service_cache",
    "require_presentation",
]
