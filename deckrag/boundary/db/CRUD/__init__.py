"""CRUD singletons."""

from deckrag.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud
from deckrag.boundary.db.CRUD.presentation_crud import PresentationCRUD, presentation_crud

__all__ = ["DocumentCRUD", "PresentationCRUD", "document_crud", "presentation_crud"]
