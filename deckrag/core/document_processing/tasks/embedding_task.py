"""
Embedding generation task.

Wraps one LangChain Embeddings instance for both chunk batches and
single queries, and checks every returned vector against the index
dimension.

Dependencies: langchain_core
System role: Embedding stage of document ingestion and query embedding for retrieval
"""

import logging

from langchain_core.embeddings import Embeddings

from deckrag.core.exceptions import EmbeddingServiceError

logger = logging.getLogger(__name__)


class EmbeddingTask:
    """Generate embeddings with a fixed output dimension."""

    def __init__(self, embeddings: Embeddings, dimension: int = 768) -> None:
        """
        Initialize embedding task.

        Args:
            embeddings: LangChain embedding model
            dimension: Expected length of every vector

        Raises:
            ValueError: When dimension is not positive
        """
        if dimension <= 0:
            raise ValueError("dimension must be positive")
        self._embeddings = embeddings
        self.dimension = dimension

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """
        Embed a batch of texts in one model call.

        Args:
            texts: Texts to embed

        Returns:
            list[list[float]]: One vector per text, in input order

        Raises:
            EmbeddingServiceError: Model failure, wrong vector count, or wrong dimension
        """
        if not texts:
            return []

        try:
            vectors = await self._embeddings.aembed_documents(texts)
        except Exception as e:
            logger.exception(
                f"{__name__}:embed_batch - Embedding call failed",
                extra={"text_count": len(texts)},
            )
            raise EmbeddingServiceError(f"Embedding generation failed: {e}") from e

        if len(vectors) != len(texts):
            raise EmbeddingServiceError(
                f"Embedding model returned {len(vectors)} vectors for {len(texts)} texts"
            )
        for vector in vectors:
            self._check_dimension(vector)
        return [list(vector) for vector in vectors]

    async def embed_one(self, text: str) -> list[float]:
        """
        Embed a single query text.

        Args:
            text: Query text

        Returns:
            list[float]: Query vector

        Raises:
            EmbeddingServiceError: Model failure or wrong dimension
        """
        try:
            vector = await self._embeddings.aembed_query(text)
        except Exception as e:
            logger.exception(f"{__name__}:embed_one - Embedding call failed")
            raise EmbeddingServiceError(f"Query embedding failed: {e}") from e

        self._check_dimension(vector)
        return list(vector)

    def _check_dimension(self, vector: list[float]) -> None:
        if len(vector) != self.dimension:
            raise EmbeddingServiceError(
                f"Embedding has dimension {len(vector)}, expected {self.dimension}",
                details={"expected": self.dimension, "actual": len(vector)},
            )
