"""
Chunk domain models for the document processing pipeline.

ChunkMetadata is the exact metadata layout persisted with every vector in
the chunk index; its camelCase aliases are the stored keys.

Dependencies: pydantic
System role: Data structures for document chunks in ingestion and retrieval
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ChunkMetadata(BaseModel):
    """Metadata stored alongside each chunk vector."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    document_id: str = Field(description="Owning document ID")
    presentation_id: str = Field(description="Owning presentation ID (retrieval partition key)")
    file_name: str = Field(description="Source file name at processing time")
    chunk_index: int = Field(ge=0, description="0-based position within the processing pass")
    text: str = Field(description="Chunk text")

    def to_index_metadata(self) -> dict:
        """Serialize with the persisted camelCase keys."""
        return self.model_dump(by_alias=True)


class ChunkCountWarning(str, Enum):
    """Non-fatal warnings about how finely a document was split."""

    SINGLE_CHUNK = "single_chunk"
    LOW_CHUNK_COUNT = "low_chunk_count"


LOW_CHUNK_COUNT_THRESHOLD = 3


def chunk_count_warning(chunk_count: int) -> ChunkCountWarning | None:
    """
    Classify a chunk count.

    Args:
        chunk_count: Number of chunks a document produced

    Returns:
        SINGLE_CHUNK for exactly one chunk, LOW_CHUNK_COUNT below the
        threshold, otherwise None
    """
    if chunk_count == 1:
        return ChunkCountWarning.SINGLE_CHUNK
    if 1 < chunk_count < LOW_CHUNK_COUNT_THRESHOLD:
        return ChunkCountWarning.LOW_CHUNK_COUNT
    return None
