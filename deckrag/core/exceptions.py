"""
Exception hierarchy for the deckrag service.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class DeckRagException(Exception):
    """Base exception for all deckrag errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class PresentationNotFoundError(DeckRagException):
    """Raised when a presentation cannot be found."""

    def __init__(self, presentation_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["presentation_id"] = presentation_id
        super().__init__(f"Presentation not found: {presentation_id}", details)


class DocumentNotFoundError(DeckRagException):
    """Raised when a document record cannot be found."""

    def __init__(self, document_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["document_id"] = document_id
        super().__init__(f"Document not found: {document_id}", details)


class DocumentProcessingError(DeckRagException):
    """Base exception for document processing errors."""

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize document processing error.

        Args:
            message: Error message
            document_id: ID of the document that failed
            details: Additional context
        """
        details = details or {}
        if document_id:
            details["document_id"] = document_id
        super().__init__(message, details)


class UnsupportedFileTypeError(DocumentProcessingError):
    """Raised when a document's declared file type has no extractor."""

    def __init__(
        self,
        file_type: str,
        document_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details["file_type"] = file_type
        super().__init__(f"Unsupported file type: {file_type}", document_id, details)


class DocumentFetchError(DocumentProcessingError):
    """Raised when a document's bytes cannot be fetched from its URL."""

    def __init__(
        self,
        message: str,
        file_url: str | None = None,
        document_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if file_url:
            details["file_url"] = file_url
        super().__init__(message, document_id, details)


class TextExtractionError(DocumentProcessingError):
    """Raised when fetched bytes cannot be parsed in the declared format."""

    def __init__(
        self,
        message: str,
        file_type: str | None = None,
        document_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if file_type:
            details["file_type"] = file_type
        super().__init__(message, document_id, details)


class EmbeddingServiceError(DocumentProcessingError):
    """Raised when the embedding model fails or returns malformed vectors."""


class ReprocessVerificationError(DocumentProcessingError):
    """Raised when chunks survive a delete that must leave none behind."""

    def __init__(
        self,
        document_id: str,
        remaining: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize verification error.

        Args:
            document_id: Document whose chunks were deleted
            remaining: Number of chunks still found after deletion
            details: Additional context
        """
        details = details or {}
        details["remaining"] = remaining
        self.remaining = remaining
        super().__init__(
            f"Failed to delete all chunks for document {document_id}: {remaining} chunks remain",
            document_id,
            details,
        )


class VectorIndexError(DeckRagException):
    """Raised when a vector index operation fails."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize vector index error.

        Args:
            message: Error message
            operation: Index operation that failed (create, upsert, query, delete, count)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class VectorIndexConfigError(VectorIndexError):
    """Raised when an index exists with an incompatible configuration."""
