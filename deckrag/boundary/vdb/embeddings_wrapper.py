"""
Gemini embeddings pinned to the chunk index dimension.

GoogleGenerativeAIEmbeddings takes output_dimensionality per call rather
than per instance, and its native async methods skip sync overrides. This
subclass injects the configured dimension on every call and routes the
async variants through the sync ones.

Dependencies: langchain_google_genai, langchain_core, python-dotenv
System role: Google embedding provider for the chunk index
"""

import logging
from typing import Any, List

from dotenv import load_dotenv
from langchain_core.runnables.config import run_in_executor
from langchain_google_genai import GoogleGenerativeAIEmbeddings

logger = logging.getLogger(__name__)
load_dotenv()

DEFAULT_MODEL = "models/text-embedding-004"
DEFAULT_DIMENSION = 768


class FixedDimensionEmbeddings(GoogleGenerativeAIEmbeddings):
    """Gemini embeddings that always return `output_dimensionality`-sized vectors."""

    _output_dimensionality: int = DEFAULT_DIMENSION

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        output_dimensionality: int = DEFAULT_DIMENSION,
        **kwargs: Any,
    ) -> None:
        super().__init__(model=model, **kwargs)
        self._output_dimensionality = output_dimensionality
        logger.info(
            f"{__name__}:__init__ - model={model}, dimension={output_dimensionality}"
        )

    def _with_dimension(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        if not kwargs.get("output_dimensionality"):
            kwargs["output_dimensionality"] = self._output_dimensionality
        return kwargs

    def embed_documents(self, texts: List[str], **kwargs: Any) -> List[List[float]]:
        return super().embed_documents(texts, **self._with_dimension(kwargs))

    def embed_query(self, text: str, **kwargs: Any) -> List[float]:
        return super().embed_query(text, **self._with_dimension(kwargs))

    async def aembed_documents(self, texts: List[str], **kwargs: Any) -> List[List[float]]:
        return await run_in_executor(None, self.embed_documents, texts)

    async def aembed_query(self, text: str, **kwargs: Any) -> List[float]:
        return await run_in_executor(None, self.embed_query, text)
