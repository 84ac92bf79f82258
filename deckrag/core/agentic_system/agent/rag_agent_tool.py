"""
Document RAG search tool.

Exposes presentation-scoped retrieval to outline and slide generation
agents. LLMs sometimes send topK as a string, so the input schema
accepts both and the retrieval service normalizes it. Missing arguments
come back as an error payload the agent can recover from.

Dependencies: langchain_core.tools, deckrag.application.services
System role: Search tool for generation agent context retrieval
"""

import logging
from typing import TYPE_CHECKING

from langchain_core.tools import StructuredTool
from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from deckrag.application.services.retrieval_service import RetrievalService

logger = logging.getLogger(__name__)

TOOL_NAME = "document-rag-search"
TOOL_DESCRIPTION = (
    "Search through uploaded documents for a presentation to find relevant information. "
    "Use this when you need to reference content from user-uploaded documents when "
    "generating presentation outlines or slides."
)


class DocumentRagSearchInput(BaseModel):
    """Tool arguments as the agent sees them."""

    query: str | None = Field(
        default=None,
        description="The search query to find relevant document content",
    )
    presentationId: str | None = Field(
        default=None,
        description="The presentation ID to search documents for",
    )
    topK: int | str = Field(
        default=5,
        description="Number of relevant chunks to retrieve (default: 5, max: 20)",
    )


def create_document_rag_tool(retrieval_service: "RetrievalService") -> StructuredTool:
    """
    Create the document search tool bound to a retrieval service.

    Args:
        retrieval_service: RetrievalService used for every call

    Returns:
        StructuredTool: Async tool returning the search payload as a dict
    """

    async def search_documents(
        query: str | None = None,
        presentationId: str | None = None,
        topK: int | str = 5,
    ) -> dict:
        logger.info(f"{__name__}:search_documents - START query_len={len(query or '')}, topK={topK}")
        response = await retrieval_service.search(query, presentationId, topK)
        payload = response.to_payload()
        logger.info(f"{__name__}:search_documents - END count={len(payload['results'])}")
        return payload

    return StructuredTool.from_function(
        coroutine=search_documents,
        name=TOOL_NAME,
        description=TOOL_DESCRIPTION,
        args_schema=DocumentRagSearchInput,
    )
