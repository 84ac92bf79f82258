"""
RAG search schemas.

Dependencies: pydantic
System role: Retrieval request/response contracts shared by the HTTP route and agent tool
"""

from pydantic import Field

from deckrag.models.common import CamelModel


class RagSearchRequest(CamelModel):
    """Request body for a presentation-scoped RAG search."""

    query: str | None = Field(default=None, description="Free-text search query")
    top_k: int | str | None = Field(default=5, description="Chunks to return (1-20)")


class RagSearchResult(CamelModel):
    """One retrieved chunk with attribution."""

    text: str
    file_name: str = "Unknown"
    score: float
    document_id: str | None = None
    chunk_index: int | None = None


class RagSearchResponse(CamelModel):
    """
    RAG search outcome.

    Exactly one shape applies: results with count, an empty result with
    message, or an empty result with error. Unset fields are omitted when
    serialized.
    """

    results: list[RagSearchResult] = Field(default_factory=list)
    query: str | None = None
    count: int | None = None
    message: str | None = None
    error: str | None = None

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
