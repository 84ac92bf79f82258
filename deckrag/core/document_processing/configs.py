"""
Configuration settings for document processing pipeline.

Provides environment-based configuration for fetching, chunking and indexing.

Dependencies: pydantic, pydantic_settings
System role: Centralized pipeline configuration
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DocumentPipelineSettings(BaseSettings):
    """Settings for document ingestion pipeline."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DOC_PIPELINE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Chunking settings
    chunk_strategy: Literal["recursive"] = Field(
        default="recursive",
        description="Chunking strategy",
    )
    chunk_size: int = Field(
        default=512,
        gt=0,
        description="Maximum chunk size in characters",
    )
    chunk_overlap: int = Field(
        default=50,
        ge=0,
        description="Overlap between consecutive chunks",
    )
    chunk_separators: list[str] = Field(
        default_factory=lambda: ["\n"],
        description="Separators tried in priority order before hard cuts",
    )

    # Fetch settings
    fetch_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout for downloading a document",
    )
    fetch_max_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts for transport-level download failures",
    )


@lru_cache
def get_pipeline_settings() -> DocumentPipelineSettings:
    """
    Get cached pipeline settings instance.

    Returns:
        DocumentPipelineSettings: Singleton settings loaded from environment
    """
    return DocumentPipelineSettings()
