"""
Document service orchestrator.

Coordinates document registration, processing, reprocessing and deletion
for a presentation. Processing itself is delegated to DocumentPipeline.

Dependencies: sqlalchemy, deckrag.boundary.db, deckrag.core.document_processing
System role: Document management orchestration
"""

import logging
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from deckrag.boundary.db.CRUD.document_crud import document_crud
from deckrag.boundary.db.CRUD.presentation_crud import presentation_crud
from deckrag.boundary.db.models.document_model import DocumentModel
from deckrag.core.document_processing.entrypoint import DocumentPipeline
from deckrag.core.document_processing.models import ChunkDeletionResult, PipelineResult
from deckrag.core.exceptions import DocumentNotFoundError, PresentationNotFoundError
from deckrag.models.document import DocumentCreateRequest

logger = logging.getLogger(__name__)


class DocumentService:
    """Document lifecycle for one request."""

    def __init__(self, db: AsyncSession, pipeline: DocumentPipeline) -> None:
        """
        Initialize document service.

        Args:
            db: AsyncSession for document metadata
            pipeline: Shared processing pipeline
        """
        self.db = db
        self.pipeline = pipeline

    async def _require_presentation(self, presentation_id: str) -> None:
        if not await presentation_crud.exists(self.db, presentation_id):
            raise PresentationNotFoundError(presentation_id)

    async def get_document(self, presentation_id: str, document_id: str) -> DocumentModel:
        """
        Load a document that belongs to the presentation.

        Raises:
            DocumentNotFoundError: Unknown document or one owned by another presentation
        """
        document = await document_crud.get_by_id(self.db, document_id)
        if document is None or document.presentation_id != presentation_id:
            raise DocumentNotFoundError(document_id, {"presentation_id": presentation_id})
        return document

    async def list_documents(self, presentation_id: str) -> Sequence[DocumentModel]:
        """
        List a presentation's documents, newest first.

        Raises:
            PresentationNotFoundError: Unknown presentation
        """
        await self._require_presentation(presentation_id)
        return await document_crud.get_by_presentation_id(self.db, presentation_id)

    async def create_document(
        self,
        presentation_id: str,
        request: DocumentCreateRequest,
    ) -> DocumentModel:
        """
        Register an uploaded document.

        The record is committed before returning so background processing,
        which uses its own session, can see it.

        Raises:
            PresentationNotFoundError: Unknown presentation
        """
        await self._require_presentation(presentation_id)
        document = await document_crud.create(
            self.db,
            presentation_id=presentation_id,
            file_name=request.file_name,
            file_url=request.file_url,
            file_type=request.file_type,
            file_size=request.file_size,
        )
        await self.db.commit()

        logger.info(
            f"{__name__}:create_document - Document registered",
            extra={"document_id": document.id, "presentation_id": presentation_id},
        )
        return document

    async def delete_document(self, presentation_id: str, document_id: str) -> ChunkDeletionResult:
        """
        Delete the document record, then clean up its chunks best-effort.

        Returns:
            ChunkDeletionResult: Outcome of the chunk cleanup

        Raises:
            DocumentNotFoundError: Unknown document
        """
        await self.get_document(presentation_id, document_id)
        await document_crud.delete_by_id(self.db, document_id)
        await self.db.commit()

        cleanup = await self.pipeline.delete_chunks_best_effort(document_id)
        logger.info(
            f"{__name__}:delete_document - Document deleted",
            extra={"document_id": document_id, "chunks_deleted": cleanup.deleted, "cleanup_error": cleanup.error},
        )
        return cleanup

    async def process_document(
        self,
        presentation_id: str,
        document_id: str,
    ) -> tuple[DocumentModel, PipelineResult]:
        """
        Process a document synchronously.

        Returns:
            tuple: Refreshed document record and pipeline result

        Raises:
            DocumentNotFoundError: Unknown document
            DocumentProcessingError, VectorIndexError: Pipeline failures
        """
        document = await self.get_document(presentation_id, document_id)
        result = await self.pipeline.process(
            document_id=document.id,
            file_url=document.file_url,
            file_type=document.file_type,
            file_name=document.file_name,
            presentation_id=document.presentation_id,
        )
        await self.db.refresh(document)
        return document, result

    async def reprocess_document(
        self,
        presentation_id: str,
        document_id: str,
    ) -> tuple[DocumentModel, PipelineResult]:
        """
        Delete, verify and rebuild a document's chunks.

        Raises:
            DocumentNotFoundError: Unknown document
            ReprocessVerificationError: Old chunks survived deletion
            DocumentProcessingError, VectorIndexError: Pipeline failures
        """
        document = await self.get_document(presentation_id, document_id)
        result = await self.pipeline.reprocess(
            document_id=document.id,
            file_url=document.file_url,
            file_type=document.file_type,
            file_name=document.file_name,
            presentation_id=document.presentation_id,
        )
        await self.db.refresh(document)
        return document, result
