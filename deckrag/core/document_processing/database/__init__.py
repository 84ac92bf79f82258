"""Metadata store writes used by the pipeline."""

from deckrag.core.document_processing.database.document_status_updater import DocumentStatusUpdater

__all__ = ["DocumentStatusUpdater"]
