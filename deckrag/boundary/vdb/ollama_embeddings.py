"""
Ollama embeddings through its OpenAI-compatible endpoint.

Lets local development run the full ingestion path without a Google API
key, using a 768-d model such as nomic-embed-text.

Dependencies: openai, langchain_core
System role: Local embedding provider
"""

from typing import List

from langchain_core.embeddings import Embeddings
from openai import AsyncOpenAI, OpenAI


class OllamaEmbeddings(Embeddings):
    """LangChain Embeddings backed by the OpenAI client pointed at Ollama."""

    def __init__(
        self,
        base_url: str = "http://localhost:11434/v1",
        model: str = "nomic-embed-text",
        api_key: str = "ollama",
    ) -> None:
        self.model = model
        self._client = OpenAI(base_url=base_url, api_key=api_key)
        self._async_client = AsyncOpenAI(base_url=base_url, api_key=api_key)

    def embed_documents(self, texts: List[str]) -> List[List[float]]:
        if not texts:
            return []
        resp = self._client.embeddings.create(model=self.model, input=texts)
        return [d.embedding for d in resp.data]

    def embed_query(self, text: str) -> List[float]:
        return self.embed_documents([text])[0]

    async def aembed_documents(self, texts: List[str]) -> List[List[float]]:
        if not texts:
            return []
        resp = await self._async_client.embeddings.create(model=self.model, input=texts)
        return [d.embedding for d in resp.data]

    async def aembed_query(self, text: str) -> List[float]:
        return (await self.aembed_documents([text]))[0]
