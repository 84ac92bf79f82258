"""
Document processing marker updater.

Writes and clears documents.processed_at on behalf of the pipeline.
Each call commits on its own, since the marker write is the second
phase of a processing pass and must not share a transaction with
anything else.

Dependencies: sqlalchemy, deckrag.boundary.db
System role: Metadata store writes for the ingestion pipeline
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from deckrag.boundary.db.CRUD.document_crud import document_crud
from deckrag.core.exceptions import DocumentNotFoundError

logger = logging.getLogger(__name__)


class DocumentStatusUpdater:
    """Update document processing markers during processing."""

    def __init__(self, db_session: AsyncSession) -> None:
        """
        Initialize with database session.

        Args:
            db_session: AsyncSession for the metadata store
        """
        self.db = db_session

    async def mark_processed(self, document_id: str) -> None:
        """
        Set processed_at to now.

        Args:
            document_id: Document ID

        Raises:
            DocumentNotFoundError: Document not found
        """
        try:
            document = await document_crud.mark_processed(self.db, document_id)
            if document is None:
                raise DocumentNotFoundError(document_id)
            await self.db.commit()

            logger.info(
                f"{__name__}:mark_processed - Document marked as processed",
                extra={"document_id": document_id},
            )
        except Exception as e:
            logger.error(f"{__name__}:mark_processed - {type(e).__name__}: {e}")
            await self.db.rollback()
            raise

    async def clear_processed(self, document_id: str) -> None:
        """
        Reset processed_at to null.

        Args:
            document_id: Document ID

        Raises:
            DocumentNotFoundError: Document not found
        """
        try:
            document = await document_crud.clear_processed(self.db, document_id)
            if document is None:
                raise DocumentNotFoundError(document_id)
            await self.db.commit()

            logger.info(
                f"{__name__}:clear_processed - Processed marker cleared",
                extra={"document_id": document_id},
            )
        except Exception as e:
            logger.error(f"{__name__}:clear_processed - {type(e).__name__}: {e}")
            await self.db.rollback()
            raise
