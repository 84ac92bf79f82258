"""Pipeline stages."""

from deckrag.core.document_processing.tasks.chunking_task import ChunkingConfig, ChunkingTask
from deckrag.core.document_processing.tasks.download_task import DownloadTask
from deckrag.core.document_processing.tasks.embedding_task import EmbeddingTask
from deckrag.core.document_processing.tasks.extraction_task import ExtractionTask

__all__ = ["ChunkingConfig", "ChunkingTask", "DownloadTask", "EmbeddingTask", "ExtractionTask"]
