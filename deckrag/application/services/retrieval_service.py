"""
Retrieval service for presentation-scoped RAG search.

Embeds a query, searches only the given presentation's chunks, and
returns ranked chunks with attribution. Every failure mode is reported
in the response instead of raised, because callers are generation agents
that should keep going without document context.

Dependencies: deckrag.core.document_processing
System role: RAG retrieval entry point
"""

import logging
import math
import re
from typing import Any

from deckrag.core.document_processing.chunk_store import ChunkStore
from deckrag.core.document_processing.tasks.embedding_task import EmbeddingTask
from deckrag.models.rag import RagSearchResponse, RagSearchResult
from deckrag.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 5
MAX_TOP_K = 20

MISSING_ARGUMENTS_ERROR = "query and presentationId are required"
NO_RESULTS_MESSAGE = "No relevant document content found for this query"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def coerce_top_k(value: Any) -> int:
    """
    Normalize a caller-supplied top_k.

    Strings are parsed by their leading integer ("7", " 3abc"). Anything
    unparseable or below 1 becomes the default; anything above the
    maximum is clamped.

    Args:
        value: int, float, str or None

    Returns:
        int: Value in [1, MAX_TOP_K]
    """
    if value is None or isinstance(value, bool):
        return DEFAULT_TOP_K

    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match is None:
            return DEFAULT_TOP_K
        number = int(match.group(1))
    elif isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return DEFAULT_TOP_K if math.isnan(value) or value < 0 else MAX_TOP_K
        number = int(value)
    else:
        return DEFAULT_TOP_K

    if number < 1:
        return DEFAULT_TOP_K
    return min(number, MAX_TOP_K)


class RetrievalService:
    """Search a presentation's document chunks."""

    def __init__(self, chunk_store: ChunkStore, embedding_task: EmbeddingTask) -> None:
        """
        Initialize retrieval service.

        Args:
            chunk_store: Shared chunk index
            embedding_task: Same embedding client used for ingestion
        """
        self._chunk_store = chunk_store
        self._embedding_task = embedding_task

    async def search(
        self,
        query: str | None,
        presentation_id: str | None,
        top_k: Any = DEFAULT_TOP_K,
    ) -> RagSearchResponse:
        """
        Run a RAG search.

        Args:
            query: Free-text query
            presentation_id: Partition to search
            top_k: Requested number of chunks (coerced into 1..20)

        Returns:
            RagSearchResponse: results+count, or message when nothing matched,
            or error when arguments are missing or the search failed
        """
        if not query or not query.strip() or not presentation_id or not presentation_id.strip():
            return RagSearchResponse(error=MISSING_ARGUMENTS_ERROR)

        k = coerce_top_k(top_k)
        log_with_context(
            logger,
            logging.INFO,
            f"{__name__}:search - START",
            presentation_id=presentation_id,
            query=query,
            top_k=k,
        )

        try:
            vector = await self._embedding_task.embed_one(query)
            hits = await self._chunk_store.search(vector, presentation_id, k)
        except Exception as e:
            logger.exception(
                f"{__name__}:search - Search failed",
                extra={"presentation_id": presentation_id},
            )
            return RagSearchResponse(error=str(e), query=query)

        if not hits:
            logger.info(f"{__name__}:search - No results", extra={"presentation_id": presentation_id})
            return RagSearchResponse(message=NO_RESULTS_MESSAGE, query=query)

        results = [
            RagSearchResult(
                text=hit.metadata.get("text", ""),
                file_name=hit.metadata.get("fileName") or "Unknown",
                score=hit.score,
                document_id=hit.metadata.get("documentId"),
                chunk_index=hit.metadata.get("chunkIndex"),
            )
            for hit in hits
        ]
        logger.info(f"{__name__}:search - END count={len(results)}")
        return RagSearchResponse(results=results, query=query, count=len(results))
