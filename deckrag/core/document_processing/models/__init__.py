"""Document processing models."""

from deckrag.core.document_processing.models.chunk import (
    ChunkCountWarning,
    ChunkMetadata,
    chunk_count_warning,
)
from deckrag.core.document_processing.models.pipeline_result import (
    ChunkDeletionResult,
    PipelineResult,
    ProcessingOutcome,
)

__all__ = [
    "ChunkCountWarning",
    "ChunkDeletionResult",
    "ChunkMetadata",
    "PipelineResult",
    "ProcessingOutcome",
    "chunk_count_warning",
]
