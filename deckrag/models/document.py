"""
Document domain models and schemas.

Request/response schemas for document operations.

Dependencies: pydantic
System role: Document API contracts
"""

from datetime import datetime

from pydantic import Field

from deckrag.core.document_processing.models import ChunkDeletionResult, PipelineResult
from deckrag.models.common import CamelModel


class DocumentCreateRequest(CamelModel):
    """Request schema for registering an uploaded document."""

    file_name: str = Field(min_length=1, description="Original filename")
    file_url: str = Field(min_length=1, description="URL the bytes can be fetched from")
    file_type: str = Field(min_length=1, description="Declared MIME type")
    file_size: int = Field(default=0, ge=0, description="Size in bytes")


class DocumentResponse(CamelModel):
    """Response schema for document operations."""

    id: str
    presentation_id: str
    file_name: str
    file_url: str
    file_type: str
    file_size: int
    uploaded_at: datetime
    processed_at: datetime | None = None


class DocumentListResponse(CamelModel):
    """Document list response."""

    documents: list[DocumentResponse]
    total: int


class ProcessDocumentResponse(CamelModel):
    """Response for synchronous process and reprocess requests."""

    success: bool
    document: DocumentResponse
    message: str
    result: PipelineResult | None = None


class DeleteDocumentResponse(CamelModel):
    """Response for document deletion."""

    success: bool
    chunk_cleanup: ChunkDeletionResult
