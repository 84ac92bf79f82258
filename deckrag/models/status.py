"""
Processing status schemas.

Dependencies: pydantic
System role: Status reporting contracts
"""

from datetime import datetime
from enum import Enum

from pydantic import Field

from deckrag.core.document_processing.models import ChunkCountWarning
from deckrag.models.common import CamelModel


class ProcessingStatus(str, Enum):
    """Reconciled state of a document's marker and its chunks."""

    NOT_PROCESSED = "not_processed"
    FULLY_PROCESSED = "fully_processed"
    MARKED_PROCESSED_BUT_NO_CHUNKS = "marked_processed_but_no_chunks"
    CHUNKS_EXIST_BUT_NOT_MARKED = "chunks_exist_but_not_marked"


class DocumentProcessingStatus(CamelModel):
    """Status of one document."""

    exists: bool
    file_name: str | None = None
    uploaded_at: datetime | None = None
    processed_at: datetime | None = None
    is_processed: bool
    chunk_count: int
    status: ProcessingStatus
    warning: ChunkCountWarning | None = None
    index_error: str | None = Field(default=None, description="Set when the chunk count could not be read")


class DocumentStatusEntry(DocumentProcessingStatus):
    """Per-document row of a presentation summary."""

    document_id: str


class PresentationStatusSummary(CamelModel):
    """Status roll-up for every document of a presentation."""

    total: int
    processed: int
    not_processed: int
    total_chunks: int
    documents: list[DocumentStatusEntry]
