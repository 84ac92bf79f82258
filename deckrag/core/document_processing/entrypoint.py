"""
Document pipeline orchestrator.

Coordinates text extraction, chunking, embedding and chunk index writes
for one document, and keeps the document's processed_at marker in step.

A pass is two-phase: chunks are written to the vector index first and
processed_at is set last, in a separate store. A crash between the two
leaves chunks without the marker, which the status service reports as
chunks_exist_but_not_marked.

Dependencies: All task modules, configs, deckrag.boundary.db
System role: Pipeline orchestration (coordinates only)
"""

import logging
import time

from langchain_core.documents import Document
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .chunk_store import ChunkStore
from .configs import DocumentPipelineSettings, get_pipeline_settings
from .database import DocumentStatusUpdater
from .locks import DocumentLockRegistry
from .models import (
    ChunkDeletionResult,
    ChunkMetadata,
    PipelineResult,
    ProcessingOutcome,
    chunk_count_warning,
)
from .tasks import ChunkingConfig, ChunkingTask, DownloadTask, EmbeddingTask, ExtractionTask
from deckrag.core.exceptions import DocumentNotFoundError, ReprocessVerificationError
from deckrag.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


class DocumentPipeline:
    """Orchestrate document ingestion: fetch -> extract -> chunk -> embed -> upsert -> mark."""

    def __init__(
        self,
        chunk_store: ChunkStore,
        embedding_task: EmbeddingTask,
        session_factory: async_sessionmaker[AsyncSession],
        settings: DocumentPipelineSettings | None = None,
        extraction_task: ExtractionTask | None = None,
        chunking_task: ChunkingTask | None = None,
        locks: DocumentLockRegistry | None = None,
    ) -> None:
        """
        Initialize pipeline with its collaborators.

        Args:
            chunk_store: Shared chunk index
            embedding_task: Shared embedding client
            session_factory: Opens sessions for processed_at writes
            settings: Pipeline settings (uses defaults if None)
            extraction_task: Text extractor (built from settings if None)
            chunking_task: Chunker (built from settings if None)
            locks: Per-document lock registry
        """
        self._settings = settings or get_pipeline_settings()
        self._chunk_store = chunk_store
        self._embedding_task = embedding_task
        self._session_factory = session_factory

        self._extraction_task = extraction_task or ExtractionTask(
            DownloadTask(
                timeout_seconds=self._settings.fetch_timeout_seconds,
                max_attempts=self._settings.fetch_max_attempts,
            )
        )
        self._chunking_task = chunking_task or ChunkingTask(
            ChunkingConfig.from_settings(self._settings)
        )
        self._locks = locks or DocumentLockRegistry()

    @property
    def chunk_store(self) -> ChunkStore:
        return self._chunk_store

    async def ensure_ready(self) -> None:
        """Initialize the chunk index if that has not happened yet."""
        await self._chunk_store.ensure_ready()

    async def process(
        self,
        document_id: str,
        file_url: str,
        file_type: str,
        file_name: str,
        presentation_id: str,
    ) -> PipelineResult:
        """
        Process a document through the full pipeline.

        Args:
            document_id: Document ID
            file_url: Where the raw bytes live
            file_type: Declared content type
            file_name: Original filename, copied onto every chunk
            presentation_id: Owning presentation, copied onto every chunk

        Returns:
            PipelineResult: Outcome, chunk count, warning and timing

        Raises:
            UnsupportedFileTypeError: No extractor for file_type
            DocumentFetchError: Download failed
            TextExtractionError: Content could not be parsed
            EmbeddingServiceError: Embedding failed (nothing was written)
            VectorIndexError: Chunk write failed
            DocumentNotFoundError: Document vanished before it could be marked
        """
        async with self._locks.hold(document_id):
            return await self._process_unlocked(
                document_id, file_url, file_type, file_name, presentation_id
            )

    async def reprocess(
        self,
        document_id: str,
        file_url: str,
        file_type: str,
        file_name: str,
        presentation_id: str,
    ) -> PipelineResult:
        """
        Replace a document's chunks with a fresh processing generation.

        Old chunks are deleted and verified gone before processed_at is
        cleared and the pass runs again.

        Raises:
            ReprocessVerificationError: Chunks survived the delete
            Any error raised by process()
        """
        async with self._locks.hold(document_id):
            await self._delete_verified(document_id)
            async with self._session_factory() as session:
                await DocumentStatusUpdater(session).clear_processed(document_id)
            return await self._process_unlocked(
                document_id, file_url, file_type, file_name, presentation_id
            )

    async def delete_chunks_or_throw(self, document_id: str) -> int:
        """
        Delete a document's chunks and verify none remain.

        Returns:
            int: Number of chunks deleted

        Raises:
            ReprocessVerificationError: Chunks remain after the delete
            VectorIndexError: Backend failure
        """
        async with self._locks.hold(document_id):
            return await self._delete_verified(document_id)

    async def delete_chunks_best_effort(self, document_id: str) -> ChunkDeletionResult:
        """
        Delete a document's chunks without ever raising.

        Used when the document record itself is being removed; any failure
        is logged and reported in the result.

        Returns:
            ChunkDeletionResult: Deleted and remaining counts, or the error
        """
        async with self._locks.hold(document_id):
            try:
                deleted = await self._chunk_store.delete_for_document(document_id)
            except Exception as e:
                logger.exception(
                    f"{__name__}:delete_chunks_best_effort - Delete failed",
                    extra={"document_id": document_id},
                )
                return ChunkDeletionResult(document_id=document_id, error=str(e))

            try:
                remaining = await self._chunk_store.count_for_document(document_id)
            except Exception as e:
                logger.exception(
                    f"{__name__}:delete_chunks_best_effort - Verification failed",
                    extra={"document_id": document_id},
                )
                return ChunkDeletionResult(document_id=document_id, deleted=deleted, error=str(e))

        result = ChunkDeletionResult(document_id=document_id, deleted=deleted, remaining=remaining)
        if remaining:
            result.error = f"{remaining} chunks remain after delete"
            logger.warning(
                f"{__name__}:delete_chunks_best_effort - Chunks remain after delete",
                extra={"document_id": document_id, "deleted": deleted, "remaining": remaining},
            )
        else:
            logger.info(
                f"{__name__}:delete_chunks_best_effort - Chunks deleted",
                extra={"document_id": document_id, "deleted": deleted},
            )
        return result

    async def process_in_background(
        self,
        document_id: str,
        file_url: str,
        file_type: str,
        file_name: str,
        presentation_id: str,
    ) -> None:
        """Fire-and-forget entry for the upload path; errors are logged, never raised."""
        try:
            await self.process(document_id, file_url, file_type, file_name, presentation_id)
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:process_in_background - Processing failed",
                e,
                document_id=document_id,
                presentation_id=presentation_id,
                file_url=file_url,
            )

    async def _delete_verified(self, document_id: str) -> int:
        deleted = await self._chunk_store.delete_for_document(document_id)
        remaining = await self._chunk_store.count_for_document(document_id)
        if remaining > 0:
            logger.error(
                f"{__name__}:_delete_verified - Chunks remain after delete",
                extra={"document_id": document_id, "deleted": deleted, "remaining": remaining},
            )
            raise ReprocessVerificationError(document_id, remaining)

        logger.info(
            f"{__name__}:_delete_verified - Deleted chunks",
            extra={"document_id": document_id, "deleted": deleted},
        )
        return deleted

    async def _process_unlocked(
        self,
        document_id: str,
        file_url: str,
        file_type: str,
        file_name: str,
        presentation_id: str,
    ) -> PipelineResult:
        start_time = time.perf_counter()

        def result(outcome: ProcessingOutcome, chunk_count: int = 0, warning=None) -> PipelineResult:
            return PipelineResult(
                document_id=document_id,
                outcome=outcome,
                chunk_count=chunk_count,
                warning=warning,
                processing_time_ms=(time.perf_counter() - start_time) * 1000,
            )

        await self.ensure_ready()

        logger.info(
            f"{__name__}:process - Processing document",
            extra={"document_id": document_id, "file_type": file_type, "presentation_id": presentation_id},
        )

        text = await self._extraction_task.extract(file_url, file_type)
        if not text.strip():
            logger.warning(
                f"{__name__}:process - No text extracted, document left unprocessed",
                extra={"document_id": document_id, "file_name": file_name},
            )
            return result(ProcessingOutcome.SKIPPED_EMPTY_TEXT)

        source = Document(
            page_content=text,
            metadata={
                "documentId": document_id,
                "fileName": file_name,
                "presentationId": presentation_id,
            },
        )
        chunks = self._chunking_task.chunk([source])
        if not chunks:
            logger.warning(
                f"{__name__}:process - Chunker produced no chunks, document left unprocessed",
                extra={"document_id": document_id, "text_length": len(text)},
            )
            return result(ProcessingOutcome.SKIPPED_NO_CHUNKS)

        warning = chunk_count_warning(len(chunks))
        if warning is not None:
            logger.warning(
                f"{__name__}:process - Low chunk granularity ({warning.value})",
                extra={"document_id": document_id, "chunk_count": len(chunks), "text_length": len(text)},
            )

        texts = [chunk.page_content for chunk in chunks]
        vectors = await self._embedding_task.embed_batch(texts)

        metadata = [
            ChunkMetadata(
                document_id=document_id,
                presentation_id=presentation_id,
                file_name=file_name,
                chunk_index=chunk.metadata["chunk_index"],
                text=chunk.page_content,
            )
            for chunk in chunks
        ]
        await self._chunk_store.upsert_chunks(vectors, metadata)

        try:
            async with self._session_factory() as session:
                await DocumentStatusUpdater(session).mark_processed(document_id)
        except DocumentNotFoundError:
            # record deleted mid-pass; drop the generation just written
            await self._drop_orphaned_chunks(document_id)
            raise

        processed = result(ProcessingOutcome.PROCESSED, len(chunks), warning)
        logger.info(
            f"{__name__}:process - Document processed",
            extra={
                "document_id": document_id,
                "chunk_count": processed.chunk_count,
                "processing_time_ms": round(processed.processing_time_ms, 2),
            },
        )
        return processed

    async def _drop_orphaned_chunks(self, document_id: str) -> None:
        try:
            await self._chunk_store.delete_for_document(document_id)
        except Exception:
            logger.exception(
                f"{__name__}:_drop_orphaned_chunks - Cleanup failed",
                extra={"document_id": document_id},
            )
