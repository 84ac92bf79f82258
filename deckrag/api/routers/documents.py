"""
Document API endpoints.

Routes:
- GET /presentations/{id}/documents - List documents
- POST /presentations/{id}/documents - Register document and process in background
- GET /presentations/{id}/documents/status - Processing summary for the presentation
- DELETE /presentations/{id}/documents/{doc_id} - Delete document and its chunks
- POST /presentations/{id}/documents/{doc_id}/process - Process synchronously
- POST /presentations/{id}/documents/{doc_id}/reprocess - Rebuild chunks synchronously
- GET /presentations/{id}/documents/{doc_id}/status - Processing status

Dependencies: deckrag.application.services, deckrag.models
System role: Document HTTP API
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException

from deckrag.api.deps import (
    get_document_service,
    get_document_status_service,
    require_presentation,
)
from deckrag.application.services import DocumentService, DocumentStatusService
from deckrag.core.document_processing.models import PipelineResult, ProcessingOutcome
from deckrag.core.exceptions import (
    DeckRagException,
    DocumentNotFoundError,
    PresentationNotFoundError,
    UnsupportedFileTypeError,
)
from deckrag.models.document import (
    DeleteDocumentResponse,
    DocumentCreateRequest,
    DocumentListResponse,
    DocumentResponse,
    ProcessDocumentResponse,
)
from deckrag.models.status import DocumentProcessingStatus, PresentationStatusSummary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/presentations", tags=["documents"])

_OUTCOME_MESSAGES = {
    ProcessingOutcome.PROCESSED: "Document processed successfully",
    ProcessingOutcome.SKIPPED_EMPTY_TEXT: "No text could be extracted from the document",
    ProcessingOutcome.SKIPPED_NO_CHUNKS: "Document produced no chunks",
}


def _to_http_error(e: Exception, action: str) -> HTTPException:
    if isinstance(e, (DocumentNotFoundError, PresentationNotFoundError)):
        return HTTPException(status_code=404, detail=e.message)
    if isinstance(e, UnsupportedFileTypeError):
        return HTTPException(status_code=422, detail=e.message)
    if isinstance(e, DeckRagException):
        return HTTPException(status_code=500, detail=e.message)
    return HTTPException(status_code=500, detail=f"Failed to {action}")


def _process_response(document, result: PipelineResult, reprocessed: bool = False) -> ProcessDocumentResponse:
    message = _OUTCOME_MESSAGES[result.outcome]
    if reprocessed and result.outcome == ProcessingOutcome.PROCESSED:
        message = "Document reprocessed successfully"
    return ProcessDocumentResponse(
        success=result.outcome == ProcessingOutcome.PROCESSED,
        document=DocumentResponse.model_validate(document),
        message=message,
        result=result,
    )


@router.get("/{presentation_id}/documents", response_model=DocumentListResponse)
async def list_documents(
    presentation_id: str,
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentListResponse:
    """
    List a presentation's documents, newest first.

    Raises:
        HTTPException(404): Presentation not found
    """
    try:
        documents = await document_service.list_documents(presentation_id)
    except PresentationNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)

    items = [DocumentResponse.model_validate(doc) for doc in documents]
    return DocumentListResponse(documents=items, total=len(items))


@router.post("/{presentation_id}/documents", response_model=DocumentResponse, status_code=201)
async def create_document(
    presentation_id: str,
    request: DocumentCreateRequest,
    background_tasks: BackgroundTasks,
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentResponse:
    """
    Register an uploaded document and schedule processing.

    Processing runs after the response is sent; its failures are logged
    and surface later through the status endpoints.

    Raises:
        HTTPException(404): Presentation not found
    """
    try:
        document = await document_service.create_document(presentation_id, request)
    except PresentationNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)

    background_tasks.add_task(
        document_service.pipeline.process_in_background,
        document_id=document.id,
        file_url=document.file_url,
        file_type=document.file_type,
        file_name=document.file_name,
        presentation_id=presentation_id,
    )
    logger.info(
        "Document registered, processing scheduled",
        extra={"presentation_id": presentation_id, "document_id": document.id},
    )
    return DocumentResponse.model_validate(document)


@router.get(
    "/{presentation_id}/documents/status",
    response_model=PresentationStatusSummary,
    dependencies=[Depends(require_presentation)],
)
async def get_presentation_status(
    presentation_id: str,
    status_service: DocumentStatusService = Depends(get_document_status_service),
) -> PresentationStatusSummary:
    """Processing summary for every document of the presentation."""
    return await status_service.summary_of(presentation_id)


@router.delete("/{presentation_id}/documents/{document_id}", response_model=DeleteDocumentResponse)
async def delete_document(
    presentation_id: str,
    document_id: str,
    document_service: DocumentService = Depends(get_document_service),
) -> DeleteDocumentResponse:
    """
    Delete a document record, then remove its chunks best-effort.

    Chunk cleanup failures do not fail the request; they are reported
    in chunkCleanup.

    Raises:
        HTTPException(404): Document not found in this presentation
        HTTPException(500): Deletion failed
    """
    logger.info(
        "Document deletion request",
        extra={"presentation_id": presentation_id, "document_id": document_id},
    )
    try:
        cleanup = await document_service.delete_document(presentation_id, document_id)
    except Exception as e:
        if not isinstance(e, DocumentNotFoundError):
            logger.exception(
                "Failed to delete document",
                extra={"presentation_id": presentation_id, "document_id": document_id},
            )
        raise _to_http_error(e, "delete document")

    return DeleteDocumentResponse(success=True, chunk_cleanup=cleanup)


@router.post(
    "/{presentation_id}/documents/{document_id}/process",
    response_model=ProcessDocumentResponse,
)
async def process_document(
    presentation_id: str,
    document_id: str,
    document_service: DocumentService = Depends(get_document_service),
) -> ProcessDocumentResponse:
    """
    Process a document synchronously.

    Raises:
        HTTPException(404): Document not found in this presentation
        HTTPException(422): Unsupported file type
        HTTPException(500): Processing failed
    """
    try:
        document, result = await document_service.process_document(presentation_id, document_id)
    except Exception as e:
        logger.exception(
            "Document processing failed",
            extra={"presentation_id": presentation_id, "document_id": document_id},
        )
        raise _to_http_error(e, "process document")

    return _process_response(document, result)


@router.post(
    "/{presentation_id}/documents/{document_id}/reprocess",
    response_model=ProcessDocumentResponse,
)
async def reprocess_document(
    presentation_id: str,
    document_id: str,
    document_service: DocumentService = Depends(get_document_service),
) -> ProcessDocumentResponse:
    """
    Delete, verify and rebuild a document's chunks.

    Raises:
        HTTPException(404): Document not found in this presentation
        HTTPException(422): Unsupported file type
        HTTPException(500): Verification or processing failed
    """
    try:
        document, result = await document_service.reprocess_document(presentation_id, document_id)
    except Exception as e:
        logger.exception(
            "Document reprocessing failed",
            extra={"presentation_id": presentation_id, "document_id": document_id},
        )
        raise _to_http_error(e, "reprocess document")

    return _process_response(document, result, reprocessed=True)


@router.get(
    "/{presentation_id}/documents/{document_id}/status",
    response_model=DocumentProcessingStatus,
    dependencies=[Depends(require_presentation)],
)
async def get_document_status(
    presentation_id: str,
    document_id: str,
    document_service: DocumentService = Depends(get_document_service),
    status_service: DocumentStatusService = Depends(get_document_status_service),
) -> DocumentProcessingStatus:
    """
    Reconciled processing status for one document.

    Raises:
        HTTPException(404): Unknown presentation, or document not in this presentation
    """
    try:
        await document_service.get_document(presentation_id, document_id)
    except DocumentNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)

    return await status_service.status_of(document_id)
