"""
Embedding model factory.

Builds the single LangChain Embeddings instance shared by document
ingestion and query embedding, so both sides use one model configuration.

Dependencies: deckrag.configs, deckrag.boundary.vdb
System role: Embedding provider selection
"""

import logging

from langchain_core.embeddings import Embeddings

from deckrag.configs import get_settings
from deckrag.configs.vector_store import VectorStoreSettings

logger = logging.getLogger(__name__)


def get_embeddings(settings: VectorStoreSettings | None = None) -> Embeddings:
    """
    Create the configured embedding model.

    Args:
        settings: Vector store settings (defaults to application settings)

    Returns:
        Embeddings: Provider instance producing settings.dimension-sized vectors

    Raises:
        ValueError: If the provider is not recognized
    """
    settings = settings or get_settings().vector_store
    provider = settings.embedding_provider

    logger.info(f"{__name__}:get_embeddings - Creating embeddings for provider={provider}")

    if provider == "google":
        from deckrag.boundary.vdb.embeddings_wrapper import FixedDimensionEmbeddings

        return FixedDimensionEmbeddings(
            model=settings.embedding_model,
            output_dimensionality=settings.dimension,
        )
    if provider == "ollama":
        from deckrag.boundary.vdb.ollama_embeddings import OllamaEmbeddings

        return OllamaEmbeddings(base_url=settings.ollama_base_url, model=settings.ollama_model)

    raise ValueError(f"Unknown embedding provider: {provider}. Use 'google' or 'ollama'.")
