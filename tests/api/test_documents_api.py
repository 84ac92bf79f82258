from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from deckrag.api.deps.dependencies import (
    get_document_service,
    get_document_status_service,
    require_presentation,
)
from deckrag.api.main import create_app
from deckrag.core.document_processing.models import (
    ChunkDeletionResult,
    PipelineResult,
    ProcessingOutcome,
)
from deckrag.core.exceptions import (
    DocumentNotFoundError,
    PresentationNotFoundError,
    ReprocessVerificationError,
    UnsupportedFileTypeError,
)
from deckrag.models.status import (
    DocumentProcessingStatus,
    DocumentStatusEntry,
    PresentationStatusSummary,
    ProcessingStatus,
)

PRESENTATION_ID = "pres-1"
DOCUMENT_ID = "doc-1"


def _document(processed: bool = False) -> SimpleNamespace:
    now = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    return SimpleNamespace(
        id=DOCUMENT_ID,
        presentation_id=PRESENTATION_ID,
        file_name="brief.txt",
        file_url="https://files.test/brief.txt",
        file_type="text/plain",
        file_size=42,
        uploaded_at=now,
        processed_at=now if processed else None,
    )


def _result(outcome=ProcessingOutcome.PROCESSED, chunk_count=3) -> PipelineResult:
    return PipelineResult(
        document_id=DOCUMENT_ID,
        outcome=outcome,
        chunk_count=chunk_count,
        processing_time_ms=12.5,
    )


@pytest.fixture
def client():
    app = create_app()
    return TestClient(app)


class RecordingPipeline:
    """Captures background processing calls."""

    def __init__(self):
        self.calls = []

    async def process_in_background(self, **kwargs):
        self.calls.append(kwargs)


@pytest.fixture
def mock_document_service(client):
    service = AsyncMock()
    service.pipeline = RecordingPipeline()
    client.app.dependency_overrides[get_document_service] = lambda: service
    return service


@pytest.fixture
def mock_status_service(client):
    service = AsyncMock()
    client.app.dependency_overrides[get_document_status_service] = lambda: service
    client.app.dependency_overrides[require_presentation] = lambda presentation_id: presentation_id
    return service


def test_list_documents(client, mock_document_service):
    mock_document_service.list_documents.return_value = [_document()]

    response = client.get(f"/api/v1/presentations/{PRESENTATION_ID}/documents")

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["documents"][0]["fileName"] == "brief.txt"
    assert data["documents"][0]["presentationId"] == PRESENTATION_ID
    assert data["documents"][0]["processedAt"] is None


def test_list_documents_unknown_presentation(client, mock_document_service):
    mock_document_service.list_documents.side_effect = PresentationNotFoundError("missing")

    response = client.get("/api/v1/presentations/missing/documents")

    assert response.status_code == 404


def test_create_document_schedules_processing(client, mock_document_service):
    mock_document_service.create_document.return_value = _document()

    response = client.post(
        f"/api/v1/presentations/{PRESENTATION_ID}/documents",
        json={
            "fileName": "brief.txt",
            "fileUrl": "https://files.test/brief.txt",
            "fileType": "text/plain",
            "fileSize": 42,
        },
    )

    assert response.status_code == 201
    assert response.json()["id"] == DOCUMENT_ID
    request = mock_document_service.create_document.call_args.args[1]
    assert request.file_url == "https://files.test/brief.txt"
    assert mock_document_service.pipeline.calls == [
        {
            "document_id": DOCUMENT_ID,
            "file_url": "https://files.test/brief.txt",
            "file_type": "text/plain",
            "file_name": "brief.txt",
            "presentation_id": PRESENTATION_ID,
        }
    ]


def test_create_document_validates_body(client, mock_document_service):
    response = client.post(
        f"/api/v1/presentations/{PRESENTATION_ID}/documents",
        json={"fileName": "brief.txt"},
    )

    assert response.status_code == 422
    mock_document_service.create_document.assert_not_called()


def test_process_document(client, mock_document_service):
    mock_document_service.process_document.return_value = (_document(processed=True), _result())

    response = client.post(f"/api/v1/presentations/{PRESENTATION_ID}/documents/{DOCUMENT_ID}/process")

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["message"] == "Document processed successfully"
    assert data["result"]["chunkCount"] == 3
    assert data["document"]["processedAt"] is not None


def test_process_document_with_no_text(client, mock_document_service):
    mock_document_service.process_document.return_value = (
        _document(),
        _result(ProcessingOutcome.SKIPPED_EMPTY_TEXT, chunk_count=0),
    )

    response = client.post(f"/api/v1/presentations/{PRESENTATION_ID}/documents/{DOCUMENT_ID}/process")

    assert response.status_code == 200
    assert response.json()["success"] is False
    assert response.json()["result"]["outcome"] == "skipped_empty_text"


@pytest.mark.parametrize(
    "error, status_code",
    [
        (DocumentNotFoundError(DOCUMENT_ID), 404),
        (UnsupportedFileTypeError("image/png"), 422),
        (RuntimeError("unexpected"), 500),
    ],
)
def test_process_document_errors(client, mock_document_service, error, status_code):
    mock_document_service.process_document.side_effect = error

    response = client.post(f"/api/v1/presentations/{PRESENTATION_ID}/documents/{DOCUMENT_ID}/process")

    assert response.status_code == status_code


def test_reprocess_document(client, mock_document_service):
    mock_document_service.reprocess_document.return_value = (_document(processed=True), _result())

    response = client.post(f"/api/v1/presentations/{PRESENTATION_ID}/documents/{DOCUMENT_ID}/reprocess")

    assert response.status_code == 200
    assert response.json()["message"] == "Document reprocessed successfully"


def test_reprocess_verification_failure(client, mock_document_service):
    mock_document_service.reprocess_document.side_effect = ReprocessVerificationError(DOCUMENT_ID, 2)

    response = client.post(f"/api/v1/presentations/{PRESENTATION_ID}/documents/{DOCUMENT_ID}/reprocess")

    assert response.status_code == 500
    assert "2 chunks remain" in response.json()["detail"]


def test_delete_document(client, mock_document_service):
    mock_document_service.delete_document.return_value = ChunkDeletionResult(
        document_id=DOCUMENT_ID, deleted=3, remaining=0
    )

    response = client.delete(f"/api/v1/presentations/{PRESENTATION_ID}/documents/{DOCUMENT_ID}")

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["chunkCleanup"]["deleted"] == 3
    mock_document_service.delete_document.assert_called_once_with(PRESENTATION_ID, DOCUMENT_ID)


def test_delete_document_not_found(client, mock_document_service):
    mock_document_service.delete_document.side_effect = DocumentNotFoundError(DOCUMENT_ID)

    response = client.delete(f"/api/v1/presentations/{PRESENTATION_ID}/documents/{DOCUMENT_ID}")

    assert response.status_code == 404


def test_document_status(client, mock_document_service, mock_status_service):
    mock_status_service.status_of.return_value = DocumentProcessingStatus(
        exists=True,
        file_name="brief.txt",
        is_processed=False,
        chunk_count=0,
        status=ProcessingStatus.MARKED_PROCESSED_BUT_NO_CHUNKS,
    )

    response = client.get(f"/api/v1/presentations/{PRESENTATION_ID}/documents/{DOCUMENT_ID}/status")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "marked_processed_but_no_chunks"
    assert data["chunkCount"] == 0
    assert data["isProcessed"] is False
    mock_document_service.get_document.assert_awaited_once_with(PRESENTATION_ID, DOCUMENT_ID)
    mock_status_service.status_of.assert_awaited_once_with(DOCUMENT_ID)


def test_document_status_in_other_presentation(client, mock_document_service, mock_status_service):
    mock_document_service.get_document.side_effect = DocumentNotFoundError(
        DOCUMENT_ID, {"presentation_id": "pres-2"}
    )

    response = client.get(f"/api/v1/presentations/pres-2/documents/{DOCUMENT_ID}/status")

    assert response.status_code == 404
    mock_status_service.status_of.assert_not_called()


def test_document_status_unknown_document(client, mock_document_service, mock_status_service):
    mock_document_service.get_document.side_effect = DocumentNotFoundError("missing")

    response = client.get(f"/api/v1/presentations/{PRESENTATION_ID}/documents/missing/status")

    assert response.status_code == 404
    mock_status_service.status_of.assert_not_called()


def test_document_status_unknown_presentation(client, mock_document_service, mock_status_service):
    def missing(presentation_id: str) -> str:
        raise HTTPException(status_code=404, detail="Presentation not found")

    client.app.dependency_overrides[require_presentation] = missing

    response = client.get(f"/api/v1/presentations/missing/documents/{DOCUMENT_ID}/status")

    assert response.status_code == 404
    mock_document_service.get_document.assert_not_called()
    mock_status_service.status_of.assert_not_called()


def test_presentation_status(client, mock_status_service):
    entry = DocumentStatusEntry(
        document_id=DOCUMENT_ID,
        exists=True,
        is_processed=True,
        chunk_count=4,
        status=ProcessingStatus.FULLY_PROCESSED,
    )
    mock_status_service.summary_of.return_value = PresentationStatusSummary(
        total=1, processed=1, not_processed=0, total_chunks=4, documents=[entry]
    )

    response = client.get(f"/api/v1/presentations/{PRESENTATION_ID}/documents/status")

    assert response.status_code == 200
    data = response.json()
    assert data["totalChunks"] == 4
    assert data["documents"][0]["documentId"] == DOCUMENT_ID
    mock_status_service.summary_of.assert_awaited_once_with(PRESENTATION_ID)


def test_presentation_status_unknown_presentation(client, mock_status_service):
    def missing(presentation_id: str) -> str:
        raise HTTPException(status_code=404, detail="Presentation not found")

    client.app.dependency_overrides[require_presentation] = missing

    response = client.get("/api/v1/presentations/missing/documents/status")

    assert response.status_code == 404
    mock_status_service.summary_of.assert_not_called()
