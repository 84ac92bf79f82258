"""
Presentation ORM model.

Minimal presentation record: the partition key for documents and their
chunks. Slides and outlines live outside this service.

Dependencies: sqlalchemy, deckrag.boundary.db.base
System role: Parent record for uploaded reference documents
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from deckrag.boundary.db.base import Base, IdMixin, TimestampMixin


class PresentationModel(Base, IdMixin, TimestampMixin):
    """
    Presentation ORM model.

    Attributes:
        id: Opaque string primary key
        title: Presentation title

    Relationships:
        documents: Reference documents attached to the presentation
    """

    __tablename__ = "presentations"

    title: Mapped[str] = mapped_column(String(255), nullable=False, default="Untitled")

    documents = relationship(
        "DocumentModel",
        back_populates="presentation",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
