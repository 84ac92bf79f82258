"""Application services."""

from deckrag.application.services.document_service import DocumentService
from deckrag.application.services.document_status_service import DocumentStatusService
from deckrag.application.services.retrieval_service import RetrievalService

__all__ = ["DocumentService", "DocumentStatusService", "RetrievalService"]
