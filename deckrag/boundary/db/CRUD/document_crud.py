"""
Document CRUD operations.

Extends BaseCRUD with presentation-scoped listing and processing marker
updates for DocumentModel.

Dependencies: sqlalchemy, deckrag.boundary.db.models
System role: Document persistence operations
"""

from datetime import datetime
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from deckrag.boundary.db.base import utcnow
from deckrag.boundary.db.CRUD.base_crud import BaseCRUD
from deckrag.boundary.db.models.document_model import DocumentModel


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """CRUD operations for DocumentModel."""

    def __init__(self) -> None:
        super().__init__(DocumentModel)

    async def get_by_presentation_id(
        self,
        session: AsyncSession,
        presentation_id: str,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[DocumentModel]:
        """
        Retrieve documents attached to a presentation, newest first.

        Args:
            session: Async database session
            presentation_id: Parent presentation ID
            limit: Maximum number of documents to return
            offset: Number of documents to skip

        Returns:
            Sequence of DocumentModels belonging to the presentation
        """
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.presentation_id == presentation_id)
            .order_by(DocumentModel.created_at.desc(), DocumentModel.id)
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def set_processed_at(
        self,
        session: AsyncSession,
        id: str,
        processed_at: datetime | None,
    ) -> DocumentModel | None:
        """
        Write the processing marker.

        Args:
            session: Async database session
            id: Document ID
            processed_at: Completion time, or None to clear the marker

        Returns:
            Updated DocumentModel if found, None otherwise
        """
        return await self.update_by_id(session, id, processed_at=processed_at)

    async def mark_processed(self, session: AsyncSession, id: str) -> DocumentModel | None:
        """Set processed_at to the current time."""
        return await self.set_processed_at(session, id, utcnow())

    async def clear_processed(self, session: AsyncSession, id: str) -> DocumentModel | None:
        """Reset processed_at to null."""
        return await self.set_processed_at(session, id, None)


document_crud = DocumentCRUD()
