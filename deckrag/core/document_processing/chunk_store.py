"""
Chunk store facade over the vector index.

Binds the single logical chunk index (name and dimension) to a vector
index backend and owns its one-time initialization. Built once at startup
and shared by the pipeline, the retrieval service and the status service.

Dependencies: deckrag.boundary.vdb, deckrag.core.document_processing.models
System role: Chunk persistence and lookup for ingestion and retrieval
"""

import asyncio
import logging
from typing import Sequence

from deckrag.boundary.vdb.base import DEFAULT_COUNT_LIMIT, VectorIndex
from deckrag.boundary.vdb.vector_schemas import VectorQueryResult
from deckrag.core.document_processing.models.chunk import ChunkMetadata
from deckrag.core.exceptions import VectorIndexError

logger = logging.getLogger(__name__)

DEFAULT_INDEX_NAME = "document_chunks"


class ChunkStore:
    """Document chunk index with an explicit ready lifecycle."""

    def __init__(
        self,
        index: VectorIndex,
        index_name: str = DEFAULT_INDEX_NAME,
        dimension: int = 768,
        count_limit: int = DEFAULT_COUNT_LIMIT,
    ) -> None:
        """
        Initialize chunk store.

        Args:
            index: Vector index backend
            index_name: Logical index holding every chunk
            dimension: Vector dimension of the index
            count_limit: Cap for zero-vector count probes
        """
        self.index = index
        self.index_name = index_name
        self.dimension = dimension
        self.count_limit = count_limit
        self.initialized = False
        self._init_lock = asyncio.Lock()

    async def ensure_ready(self) -> None:
        """
        Create the chunk index once.

        Safe to call from every operation: concurrent callers wait for the
        first, and a failed attempt leaves the store uninitialized so the
        next call retries.

        Raises:
            VectorIndexConfigError: Index exists with a different dimension
            VectorIndexError: Backend failure
        """
        if self.initialized:
            return
        async with self._init_lock:
            if self.initialized:
                return
            await self.index.create_index(self.index_name, self.dimension)
            self.initialized = True
            logger.info(
                f"{__name__}:ensure_ready - Chunk index ready",
                extra={"index_name": self.index_name, "dimension": self.dimension},
            )

    async def upsert_chunks(
        self,
        vectors: Sequence[Sequence[float]],
        chunks: Sequence[ChunkMetadata],
    ) -> list[str]:
        """
        Write one processing generation of chunks in a single upsert call.

        Args:
            vectors: One vector per chunk
            chunks: Chunk metadata in the same order

        Returns:
            list[str]: Record ids

        Raises:
            VectorIndexError: Length mismatch, wrong dimension, or backend failure
        """
        if len(vectors) != len(chunks):
            raise VectorIndexError(
                f"Got {len(vectors)} vectors for {len(chunks)} chunks",
                operation="upsert",
            )
        await self.ensure_ready()
        return await self.index.upsert(
            self.index_name,
            vectors,
            [chunk.to_index_metadata() for chunk in chunks],
        )

    async def search(
        self,
        vector: Sequence[float],
        presentation_id: str,
        top_k: int,
    ) -> list[VectorQueryResult]:
        """Similarity search restricted to one presentation."""
        await self.ensure_ready()
        return await self.index.query(
            self.index_name,
            vector,
            top_k=top_k,
            filter={"presentationId": presentation_id},
        )

    async def count_by_filter(self, filter: dict) -> int:
        """Count chunks matching an equality filter."""
        await self.ensure_ready()
        return await self.index.count_by_filter(self.index_name, filter, limit=self.count_limit)

    async def count_for_document(self, document_id: str) -> int:
        return await self.count_by_filter({"documentId": document_id})

    async def delete_for_document(self, document_id: str) -> int:
        """Delete every chunk of a document and return how many were removed."""
        await self.ensure_ready()
        return await self.index.delete_by_filter(self.index_name, {"documentId": document_id})
