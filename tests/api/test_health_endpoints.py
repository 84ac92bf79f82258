from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from deckrag.api.deps.dependencies import get_chunk_store
from deckrag.api.main import create_app
from deckrag.boundary.db import get_async_db
from deckrag.core.exceptions import VectorIndexConfigError


@pytest.fixture
def client():
    app = create_app()
    return TestClient(app)


def test_health_check(client):
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Server Healthy"}


def test_health_check_db(client):
    session = AsyncMock()

    async def override():
        yield session

    client.app.dependency_overrides[get_async_db] = override

    response = client.get("/api/v1/health/db")

    assert response.status_code == 200
    session.execute.assert_awaited_once()


def test_health_check_db_unavailable(client):
    session = AsyncMock()
    session.execute.side_effect = ConnectionRefusedError("connection refused")

    async def override():
        yield session

    client.app.dependency_overrides[get_async_db] = override

    response = client.get("/api/v1/health/db")

    assert response.status_code == 503


def test_health_check_vector_store(client):
    chunk_store = AsyncMock()
    client.app.dependency_overrides[get_chunk_store] = lambda: chunk_store

    response = client.get("/api/v1/health/vector-store")

    assert response.status_code == 200
    chunk_store.ensure_ready.assert_awaited_once()


def test_health_check_vector_store_misconfigured(client):
    chunk_store = AsyncMock()
    chunk_store.ensure_ready.side_effect = VectorIndexConfigError("dimension mismatch", operation="create")
    client.app.dependency_overrides[get_chunk_store] = lambda: chunk_store

    response = client.get("/api/v1/health/vector-store")

    assert response.status_code == 503
    assert "dimension mismatch" in response.json()["detail"]


def test_correlation_id_echoed(client):
    response = client.get("/api/v1/health", headers={"X-Correlation-ID": "req-123"})

    assert response.headers["X-Correlation-ID"] == "req-123"
