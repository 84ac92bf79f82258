"""
Vector index contract.

Every backend stores (vector, metadata) records in named indexes and
supports filtered similarity queries and filtered deletes. Filters are
exact-match equality on every given metadata key.

Dependencies: deckrag.boundary.vdb.vector_schemas
System role: Backend-neutral interface for chunk storage
"""

from abc import ABC, abstractmethod
from typing import Any, Sequence

from deckrag.boundary.vdb.vector_schemas import IndexDescription, VectorQueryResult
from deckrag.core.exceptions import VectorIndexError

MetadataFilter = dict[str, Any]

DEFAULT_COUNT_LIMIT = 1000


def validate_batch(
    vectors: Sequence[Sequence[float]],
    metadata: Sequence[dict[str, Any]],
    dimension: int,
) -> None:
    """
    Check an upsert batch before anything is written.

    Args:
        vectors: Vectors to insert
        metadata: One metadata dict per vector
        dimension: Dimension of the target index

    Raises:
        VectorIndexError: On length mismatch or a vector of the wrong size
    """
    if len(vectors) != len(metadata):
        raise VectorIndexError(
            f"Got {len(vectors)} vectors but {len(metadata)} metadata entries",
            operation="upsert",
        )
    for position, vector in enumerate(vectors):
        if len(vector) != dimension:
            raise VectorIndexError(
                f"Vector {position} has dimension {len(vector)}, index expects {dimension}",
                operation="upsert",
                details={"position": position},
            )


class VectorIndex(ABC):
    """Abstract vector index backend."""

    @abstractmethod
    async def create_index(self, name: str, dimension: int) -> None:
        """
        Create an index if it does not exist.

        Creating an index that already exists with the same dimension is a
        no-op.

        Raises:
            VectorIndexConfigError: Index exists with a different dimension
        """

    @abstractmethod
    async def describe_index(self, name: str) -> IndexDescription | None:
        """Return the index shape, or None when the index does not exist."""

    @abstractmethod
    async def upsert(
        self,
        name: str,
        vectors: Sequence[Sequence[float]],
        metadata: Sequence[dict[str, Any]],
    ) -> list[str]:
        """
        Append records and return their generated ids.

        No deduplication is done on content.
        """

    @abstractmethod
    async def query(
        self,
        name: str,
        vector: Sequence[float],
        top_k: int,
        filter: MetadataFilter | None = None,
    ) -> list[VectorQueryResult]:
        """Return up to top_k records ordered by descending similarity."""

    @abstractmethod
    async def delete_by_filter(self, name: str, filter: MetadataFilter) -> int:
        """Delete every record matching filter and return how many went."""

    async def count_by_filter(
        self,
        name: str,
        filter: MetadataFilter,
        limit: int = DEFAULT_COUNT_LIMIT,
    ) -> int:
        """
        Count records matching filter.

        The generic implementation issues a zero-vector query with a large
        top_k and counts what comes back, so the result saturates at
        ``limit``. Backends with a native count override this.

        Args:
            name: Index name
            filter: Metadata equality filter
            limit: top_k for the probing query

        Returns:
            int: Number of matching records, capped at limit
        """
        description = await self.describe_index(name)
        if description is None:
            raise VectorIndexError(f"Index does not exist: {name}", operation="count")
        zero_vector = [0.0] * description.dimension
        results = await self.query(name, zero_vector, top_k=limit, filter=filter)
        return len(results)

    async def close(self) -> None:
        """Release backend resources."""
        return None
