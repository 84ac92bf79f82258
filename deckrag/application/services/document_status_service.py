"""
Document status service.

Reconciles each document's processed_at marker against the number of
chunks actually present in the vector index. This is where the effects
of an interrupted two-phase processing pass become visible.

Dependencies: sqlalchemy, deckrag.boundary.db, deckrag.core.document_processing
System role: Processing status reporting
"""

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from deckrag.boundary.db.CRUD.document_crud import document_crud
from deckrag.boundary.db.models.document_model import DocumentModel
from deckrag.core.document_processing.chunk_store import ChunkStore
from deckrag.core.document_processing.models import chunk_count_warning
from deckrag.models.status import (
    DocumentProcessingStatus,
    DocumentStatusEntry,
    PresentationStatusSummary,
    ProcessingStatus,
)

logger = logging.getLogger(__name__)


def classify(processed_at: datetime | None, chunk_count: int) -> ProcessingStatus:
    """Map (marker, chunk count) to a processing status."""
    has_chunks = chunk_count > 0
    if processed_at is not None:
        return (
            ProcessingStatus.FULLY_PROCESSED
            if has_chunks
            else ProcessingStatus.MARKED_PROCESSED_BUT_NO_CHUNKS
        )
    return (
        ProcessingStatus.CHUNKS_EXIST_BUT_NOT_MARKED
        if has_chunks
        else ProcessingStatus.NOT_PROCESSED
    )


class DocumentStatusService:
    """Report per-document and per-presentation processing status."""

    def __init__(self, db: AsyncSession, chunk_store: ChunkStore) -> None:
        self.db = db
        self.chunk_store = chunk_store

    async def status_of(self, document_id: str) -> DocumentProcessingStatus:
        """
        Status for one document.

        Args:
            document_id: Document ID

        Returns:
            DocumentProcessingStatus: exists=False for an unknown document
        """
        document = await document_crud.get_by_id(self.db, document_id)
        if document is None:
            return DocumentProcessingStatus(
                exists=False,
                is_processed=False,
                chunk_count=0,
                status=ProcessingStatus.NOT_PROCESSED,
            )
        return await self._status_for(document)

    async def summary_of(self, presentation_id: str) -> PresentationStatusSummary:
        """
        Status roll-up for every document of a presentation.

        Documents are checked one after another.

        Args:
            presentation_id: Presentation ID

        Returns:
            PresentationStatusSummary: Totals plus one entry per document
        """
        documents = await document_crud.get_by_presentation_id(self.db, presentation_id)

        entries: list[DocumentStatusEntry] = []
        for document in documents:
            status = await self._status_for(document)
            entries.append(DocumentStatusEntry(document_id=document.id, **status.model_dump()))

        return PresentationStatusSummary(
            total=len(entries),
            processed=sum(1 for e in entries if e.status == ProcessingStatus.FULLY_PROCESSED),
            not_processed=sum(1 for e in entries if e.status == ProcessingStatus.NOT_PROCESSED),
            total_chunks=sum(e.chunk_count for e in entries),
            documents=entries,
        )

    async def _status_for(self, document: DocumentModel) -> DocumentProcessingStatus:
        index_error = None
        try:
            chunk_count = await self.chunk_store.count_for_document(document.id)
        except Exception as e:
            # unreachable index reads as zero chunks
            logger.exception(
                f"{__name__}:_status_for - Chunk count failed",
                extra={"document_id": document.id},
            )
            chunk_count = 0
            index_error = str(e)

        return DocumentProcessingStatus(
            exists=True,
            file_name=document.file_name,
            uploaded_at=document.uploaded_at,
            processed_at=document.processed_at,
            is_processed=document.processed_at is not None and chunk_count > 0,
            chunk_count=chunk_count,
            status=classify(document.processed_at, chunk_count),
            warning=chunk_count_warning(chunk_count),
            index_error=index_error,
        )
