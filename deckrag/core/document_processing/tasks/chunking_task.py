"""
Text chunking task using RecursiveCharacterTextSplitter.

Splits extracted text into overlapping chunks. Separators are tried in
priority order and an empty separator is always appended as the final
fallback, so an oversized run without separators is hard-cut at the
chunk size. Chunks are literal substrings of the source text and carry
their start_index.

Dependencies: langchain_text_splitters, langchain_core, pydantic
System role: Chunking stage of document ingestion pipeline
"""

from typing import Literal

from langchain_core.documents import Document
from langchain_text_splitters import RecursiveCharacterTextSplitter
from pydantic import BaseModel, Field, model_validator

from deckrag.core.document_processing.configs import DocumentPipelineSettings


class ChunkingConfig(BaseModel):
    """Chunker parameters, measured in characters."""

    strategy: Literal["recursive"] = Field(default="recursive")
    size: int = Field(default=512, gt=0)
    overlap: int = Field(default=50, ge=0)
    separators: list[str] = Field(default_factory=lambda: ["\n"])

    @model_validator(mode="after")
    def _overlap_smaller_than_size(self) -> "ChunkingConfig":
        if self.overlap >= self.size:
            raise ValueError(f"overlap ({self.overlap}) must be smaller than size ({self.size})")
        return self

    @classmethod
    def from_settings(cls, settings: DocumentPipelineSettings) -> "ChunkingConfig":
        return cls(
            strategy=settings.chunk_strategy,
            size=settings.chunk_size,
            overlap=settings.chunk_overlap,
            separators=settings.chunk_separators,
        )


class ChunkingTask:
    """Split documents into chunks using RecursiveCharacterTextSplitter."""

    def __init__(self, config: ChunkingConfig | None = None) -> None:
        """
        Initialize chunking task with splitter configuration.

        Args:
            config: Chunking parameters (defaults: 512 / 50 / ["\\n"])
        """
        self.config = config or ChunkingConfig()
        separators = [s for s in self.config.separators if s] + [""]
        self._splitter = RecursiveCharacterTextSplitter(
            separators=separators,
            chunk_size=self.config.size,
            chunk_overlap=self.config.overlap,
            strip_whitespace=False,
            add_start_index=True,
            length_function=len,
        )

    def split_text(self, text: str) -> list[str]:
        """
        Split raw text into chunk strings in reading order.

        Args:
            text: Source text

        Returns:
            list[str]: Non-blank chunks; empty for empty input
        """
        if not text:
            return []
        return [chunk for chunk in self._splitter.split_text(text) if chunk.strip()]

    def chunk(self, documents: list[Document]) -> list[Document]:
        """
        Split documents into chunks.

        Source metadata is copied onto every chunk, and chunk_index is
        assigned after blank chunks are dropped so indexes stay contiguous.

        Args:
            documents: LangChain Documents to split

        Returns:
            list[Document]: Chunked documents with preserved metadata

        Raises:
            ValueError: When documents list is empty
        """
        if not documents:
            raise ValueError("No documents to chunk")

        chunks = [
            chunk
            for chunk in self._splitter.split_documents(documents)
            if chunk.page_content.strip()
        ]
        for index, chunk in enumerate(chunks):
            chunk.metadata["chunk_index"] = index
        return chunks
