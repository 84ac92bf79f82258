"""
Shared test fixtures and configuration for entire test suite.

Provides: SQLite-backed async sessions, a local vector index, deterministic
fake embeddings, an in-memory HTTP blob server, and a fully wired pipeline.
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite, httpx, langchain_core
System role: Test infrastructure and fixture management
"""

from typing import Awaitable, Callable

import httpx
import pytest
from langchain_core.embeddings import DeterministicFakeEmbedding
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from deckrag.boundary.db.CRUD.document_crud import document_crud
from deckrag.boundary.db.create_tables import create_tables
from deckrag.boundary.db.CRUD.presentation_crud import presentation_crud
from deckrag.boundary.db.models import DocumentModel, PresentationModel
from deckrag.boundary.vdb.local_index import LocalVectorIndex
from deckrag.core.document_processing.chunk_store import ChunkStore
from deckrag.core.document_processing.configs import DocumentPipelineSettings
from deckrag.core.document_processing.entrypoint import DocumentPipeline
from deckrag.core.document_processing.tasks import DownloadTask, EmbeddingTask, ExtractionTask

DIMENSION = 768
BLOB_HOST = "https://files.test"


@pytest.fixture
async def db_engine(tmp_path):
    """
    Create a file-backed SQLite database for one test.

    A file (rather than :memory:) lets the request session and the
    pipeline's own sessions use separate connections, like production.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'deckrag.db'}")
    await create_tables(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test database."""
    return async_sessionmaker(db_engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def test_async_db(session_factory):
    """
    Request-style session on the test database.

    Yields:
        AsyncSession: Session closed after the test
    """
    async with session_factory() as session:
        yield session


@pytest.fixture
def local_index() -> LocalVectorIndex:
    """In-memory vector index."""
    return LocalVectorIndex()


@pytest.fixture
def chunk_store(local_index) -> ChunkStore:
    """Chunk store over the local index."""
    return ChunkStore(local_index, index_name="document_chunks", dimension=DIMENSION)


@pytest.fixture
def fake_embeddings() -> DeterministicFakeEmbedding:
    """Embeddings that map equal texts to equal vectors."""
    return DeterministicFakeEmbedding(size=DIMENSION)


@pytest.fixture
def embedding_task(fake_embeddings) -> EmbeddingTask:
    return EmbeddingTask(fake_embeddings, dimension=DIMENSION)


@pytest.fixture
def blob_store() -> dict[str, bytes]:
    """Path -> content served by the mock HTTP transport."""
    return {}


@pytest.fixture
async def http_client(blob_store):
    """httpx client answering from blob_store (404 for unknown paths)."""

    def handler(request: httpx.Request) -> httpx.Response:
        content = blob_store.get(request.url.path)
        if content is None:
            return httpx.Response(404)
        return httpx.Response(200, content=content)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        yield client


@pytest.fixture
def extraction_task(http_client) -> ExtractionTask:
    return ExtractionTask(DownloadTask(client=http_client, retry_wait_initial=0))


@pytest.fixture
def pipeline(chunk_store, embedding_task, session_factory, extraction_task) -> DocumentPipeline:
    """Pipeline wired to the local index, fake embeddings and test database."""
    return DocumentPipeline(
        chunk_store=chunk_store,
        embedding_task=embedding_task,
        session_factory=session_factory,
        settings=DocumentPipelineSettings(),
        extraction_task=extraction_task,
    )


@pytest.fixture
async def presentation(session_factory) -> PresentationModel:
    """Persisted presentation."""
    async with session_factory() as session:
        record = await presentation_crud.create(session, title="Quarterly review")
        await session.commit()
    return record


DocumentFactory = Callable[..., Awaitable[DocumentModel]]


@pytest.fixture
def make_document(session_factory, blob_store, presentation) -> DocumentFactory:
    """
    Create a persisted document whose bytes are served by the mock transport.

    Returns:
        Callable: async (content, file_name=..., file_type=..., presentation_id=...) -> DocumentModel
    """

    async def factory(
        content: bytes,
        file_name: str = "notes.txt",
        file_type: str = "text/plain",
        presentation_id: str | None = None,
    ) -> DocumentModel:
        async with session_factory() as session:
            document = await document_crud.create(
                session,
                presentation_id=presentation_id or presentation.id,
                file_name=file_name,
                file_url="",
                file_type=file_type,
                file_size=len(content),
            )
            path = f"/blobs/{document.id}/{file_name}"
            document.file_url = f"{BLOB_HOST}{path}"
            await session.commit()
        blob_store[path] = content
        return document

    return factory


@pytest.fixture
def numbered_lines() -> Callable[..., str]:
    """Build text of `count` distinct newline-separated lines, each `width` chars long."""

    def build(count: int, width: int = 60) -> str:
        return "\n".join(f"line {i:04d} ".ljust(width, "x") for i in range(count))

    return build
