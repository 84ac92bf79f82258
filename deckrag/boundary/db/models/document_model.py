"""
Document ORM model.

Represents an uploaded reference document and the processing marker the
ingestion pipeline maintains for it.

Dependencies: sqlalchemy, deckrag.boundary.db.base
System role: Document persistence for ingestion tracking
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from deckrag.boundary.db.base import Base, IdMixin, TimestampMixin


class DocumentModel(Base, IdMixin, TimestampMixin):
    """
    Document ORM model.

    processed_at is written last by a successful ingestion pass and cleared
    at the start of reprocessing. It is a cached belief about the chunk
    index, not ground truth; the status service reconciles the two.

    Attributes:
        id: Opaque string primary key (also stored in chunk metadata)
        presentation_id: Foreign key to PresentationModel (cascade delete)
        file_name: Original filename
        file_url: URL the raw bytes are fetched from
        file_type: Declared MIME type used to pick an extractor
        file_size: Size in bytes as reported at upload
        processed_at: Null until a processing pass completes
        created_at: Upload timestamp (UTC)

    Constraints:
        presentation_id: Foreign key ON DELETE CASCADE to presentations.id
    """

    __tablename__ = "documents"

    presentation_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("presentations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    file_name: Mapped[str] = mapped_column(String(255), nullable=False, doc="Original filename")
    file_url: Mapped[str] = mapped_column(String(2048), nullable=False)
    file_type: Mapped[str] = mapped_column(String(255), nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    processed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )

    presentation = relationship("PresentationModel", back_populates="documents")

    @property
    def uploaded_at(self) -> datetime:
        """Upload time, exposed under the name clients use."""
        return self.created_at
