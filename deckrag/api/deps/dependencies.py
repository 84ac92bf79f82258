"""
Dependency injection container.

Factory functions for FastAPI dependencies. Long-lived collaborators
(vector index, embeddings, chunk store, pipeline) are built once and
cached; services that need a database session are built per request.

Dependencies: deckrag.configs, deckrag.application, deckrag.boundary, deckrag.core
System role: DI container for service injection
"""

from fastapi import Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from deckrag.application.services import (
    DocumentService,
    DocumentStatusService,
    RetrievalService,
)
from deckrag.boundary.db import get_async_db
from deckrag.configs import get_settings


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self):
        self._vector_index = None
        self._embedding_task = None
        self._chunk_store = None
        self._document_pipeline = None
        self._retrieval_service = None

    @property
    def vector_index(self):
        """Get cached vector index backend."""
        if self._vector_index is None:
            from deckrag.boundary.vdb.vector_index_factory import get_vector_index

            self._vector_index = get_vector_index(get_settings())
        return self._vector_index

    @property
    def embedding_task(self):
        """Get cached embedding client."""
        if self._embedding_task is None:
            from deckrag.boundary.vdb.embeddings_factory import get_embeddings
            from deckrag.core.document_processing.tasks.embedding_task import EmbeddingTask

            vector_settings = get_settings().vector_store
            self._embedding_task = EmbeddingTask(
                embeddings=get_embeddings(vector_settings),
                dimension=vector_settings.dimension,
            )
        return self._embedding_task

    @property
    def chunk_store(self):
        """Get cached chunk store."""
        if self._chunk_store is None:
            from deckrag.core.document_processing.chunk_store import ChunkStore

            vector_settings = get_settings().vector_store
            self._chunk_store = ChunkStore(
                index=self.vector_index,
                index_name=vector_settings.index_name,
                dimension=vector_settings.dimension,
                count_limit=vector_settings.count_limit,
            )
        return self._chunk_store

    @property
    def document_pipeline(self):
        """Get cached document pipeline."""
        if self._document_pipeline is None:
            from deckrag.boundary.db.connection import get_async_session_factory
            from deckrag.core.document_processing.entrypoint import DocumentPipeline

            self._document_pipeline = DocumentPipeline(
                chunk_store=self.chunk_store,
                embedding_task=self.embedding_task,
                session_factory=get_async_session_factory(),
            )
        return self._document_pipeline

    @property
    def retrieval_service(self):
        """Get cached retrieval service."""
        if self._retrieval_service is None:
            self._retrieval_service = RetrievalService(
                chunk_store=self.chunk_store,
                embedding_task=self.embedding_task,
            )
        return self._retrieval_service

    async def aclose(self) -> None:
        """Release backend resources and clear all cached instances."""
        if self._vector_index is not None:
            await self._vector_index.close()
        self.clear()

    def clear(self) -> None:
        """Clear all cached instances."""
        self._vector_index = None
        self._embedding_task = None
        self._chunk_store = None
        self._document_pipeline = None
        self._retrieval_service = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_document_service(db: AsyncSession = Depends(get_async_db)) -> DocumentService:
    """
    Get document service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        DocumentService: Document service bound to the shared pipeline
    """
    return DocumentService(db=db, pipeline=get_service_cache().document_pipeline)


def get_document_status_service(db: AsyncSession = Depends(get_async_db)) -> DocumentStatusService:
    """
    Get document status service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        DocumentStatusService: Status service bound to the shared chunk store
    """
    return DocumentStatusService(db=db, chunk_store=get_service_cache().chunk_store)


def get_retrieval_service() -> RetrievalService:
    """
    Get retrieval service instance.

    Returns:
        RetrievalService: Cached retrieval service
    """
    return get_service_cache().retrieval_service


def get_chunk_store():
    """
    Get the shared chunk store.

    Returns:
        ChunkStore: Cached chunk store
    """
    return get_service_cache().chunk_store


async def require_presentation(
    presentation_id: str,
    db: AsyncSession = Depends(get_async_db),
) -> str:
    """
    Reject requests for presentations that do not exist.

    Args:
        presentation_id: Path parameter
        db: Async database session (injected via Depends)

    Returns:
        str: The presentation ID

    Raises:
        HTTPException(404): Unknown presentation
    """
    from deckrag.boundary.db.CRUD.presentation_crud import presentation_crud

    if not await presentation_crud.exists(db, presentation_id):
        raise HTTPException(status_code=404, detail="Presentation not found")
    return presentation_id
