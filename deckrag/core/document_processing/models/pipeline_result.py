"""
Pipeline result models for document processing.

Dependencies: pydantic
System role: Return types for DocumentPipeline operations
"""

from enum import Enum

from pydantic import BaseModel, Field

from deckrag.core.document_processing.models.chunk import ChunkCountWarning


class ProcessingOutcome(str, Enum):
    """How a processing pass ended without raising."""

    PROCESSED = "processed"
    SKIPPED_EMPTY_TEXT = "skipped_empty_text"
    SKIPPED_NO_CHUNKS = "skipped_no_chunks"


class PipelineResult(BaseModel):
    """Result of document processing pipeline execution."""

    document_id: str = Field(description="Unique document identifier")
    outcome: ProcessingOutcome = Field(description="Processed, or why the pass stopped early")
    chunk_count: int = Field(default=0, description="Number of chunks written")
    warning: ChunkCountWarning | None = Field(default=None, description="Low-granularity warning")
    processing_time_ms: float = Field(description="Total processing time in milliseconds")


class ChunkDeletionResult(BaseModel):
    """Outcome of a best-effort chunk deletion."""

    document_id: str
    deleted: int = Field(default=0, description="Chunks removed by the delete call")
    remaining: int | None = Field(default=None, description="Chunks found afterwards (None if not verified)")
    error: str | None = Field(default=None, description="Failure message if the cleanup did not complete")

    @property
    def succeeded(self) -> bool:
        return self.error is None and self.remaining == 0
