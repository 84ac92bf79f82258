"""
Vector store configuration.

Selects the chunk index backend and the embedding provider feeding it.

Dependencies: pydantic, pydantic_settings
System role: Vector index and embedding model configuration
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from deckrag.configs.base import BaseSettings


class VectorStoreSettings(BaseSettings):
    """Vector index and embedding configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VECTOR_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    store_type: Literal["pgvector", "local"] = Field(
        default="pgvector",
        description="Vector index backend: 'pgvector' (production) or 'local' (in-process numpy)",
    )
    index_name: str = Field(
        default="document_chunks",
        description="Logical index holding every document chunk",
    )
    dimension: int = Field(
        default=768,
        gt=0,
        description="Embedding dimension; must match the embedding model output",
    )
    count_limit: int = Field(
        default=1000,
        gt=0,
        description="top_k used when counting chunks through a zero-vector query",
    )
    local_persist_path: str | None = Field(
        default=None,
        description="JSON file backing the local index; in-memory only when unset",
    )

    embedding_provider: Literal["google", "ollama"] = Field(
        default="google",
        description="Embedding provider",
    )
    embedding_model: str = Field(
        default="models/text-embedding-004",
        description="Google embedding model ID",
    )
    ollama_base_url: str = Field(
        default="http://localhost:11434/v1",
        description="OpenAI-compatible Ollama endpoint",
    )
    ollama_model: str = Field(
        default="nomic-embed-text",
        description="Ollama embedding model name",
    )
