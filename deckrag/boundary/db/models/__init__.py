"""ORM models."""

from deckrag.boundary.db.models.document_model import DocumentModel
from deckrag.boundary.db.models.presentation_model import PresentationModel

__all__ = ["DocumentModel", "PresentationModel"]
