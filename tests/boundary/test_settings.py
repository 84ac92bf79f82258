"""Tests for configuration and backend factories."""

import pytest

from deckrag.boundary.vdb.embeddings_factory import get_embeddings
from deckrag.boundary.vdb.local_index import LocalVectorIndex
from deckrag.boundary.vdb.vector_index_factory import get_vector_index
from deckrag.configs import Settings
from deckrag.configs.database import DatabaseSettings
from deckrag.configs.vector_store import VectorStoreSettings
from deckrag.core.document_processing.configs import DocumentPipelineSettings


class TestDatabaseSettings:
    """Test connection URL construction."""

    def test_builds_asyncpg_url_from_fields(self):
        settings = DatabaseSettings(url=None, host="db", port=5433, user="u", password="p", db="slides")

        assert settings.async_database_url == "postgresql+asyncpg://u:p@db:5433/slides"

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("postgres://u:p@h/d", "postgresql+asyncpg://u:p@h/d"),
            ("postgresql://u:p@h/d", "postgresql+asyncpg://u:p@h/d"),
            ("postgresql+asyncpg://u:p@h/d", "postgresql+asyncpg://u:p@h/d"),
            ("sqlite+aiosqlite:///./dev.db", "sqlite+aiosqlite:///./dev.db"),
        ],
    )
    def test_rewrites_url_override(self, url, expected):
        assert DatabaseSettings(url=url).async_database_url == expected


class TestVectorStoreSettings:
    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("VECTOR_STORE_STORE_TYPE", "local")
        monkeypatch.setenv("VECTOR_STORE_DIMENSION", "384")

        settings = VectorStoreSettings()

        assert settings.store_type == "local"
        assert settings.dimension == 384

    def test_embedding_defaults(self, monkeypatch):
        monkeypatch.delenv("VECTOR_STORE_EMBEDDING_MODEL", raising=False)
        monkeypatch.delenv("VECTOR_STORE_DIMENSION", raising=False)

        settings = VectorStoreSettings(_env_file=None)

        assert settings.embedding_provider == "google"
        assert settings.embedding_model == "models/text-embedding-004"
        assert settings.dimension == 768

    def test_pipeline_defaults(self):
        settings = DocumentPipelineSettings(_env_file=None)

        assert settings.chunk_size == 512
        assert settings.chunk_overlap == 50
        assert settings.chunk_separators == ["\n"]


class TestFactories:
    """Test backend selection."""

    def test_local_vector_index(self, tmp_path):
        settings = Settings(
            vector_store=VectorStoreSettings(store_type="local", local_persist_path=str(tmp_path / "i.json"))
        )

        assert isinstance(get_vector_index(settings), LocalVectorIndex)

    def test_unknown_embedding_provider(self):
        settings = VectorStoreSettings.model_construct(embedding_provider="bogus")

        with pytest.raises(ValueError, match="Unknown embedding provider"):
            get_embeddings(settings)
