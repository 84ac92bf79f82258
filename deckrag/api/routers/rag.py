"""
RAG search API endpoint.

Routes: POST /presentations/{id}/rag

Dependencies: deckrag.application.services, deckrag.models
System role: Retrieval HTTP API
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from deckrag.api.deps import get_retrieval_service, require_presentation
from deckrag.application.services import RetrievalService
from deckrag.models.rag import RagSearchRequest, RagSearchResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/presentations", tags=["rag"])


@router.post(
    "/{presentation_id}/rag",
    response_model=RagSearchResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(require_presentation)],
)
async def rag_search(
    presentation_id: str,
    request: RagSearchRequest,
    retrieval_service: RetrievalService = Depends(get_retrieval_service),
) -> RagSearchResponse:
    """
    Search the presentation's documents.

    Search failures come back as an error field with status 200.

    Raises:
        HTTPException(400): Query missing
        HTTPException(404): Presentation not found
    """
    if not request.query:
        raise HTTPException(status_code=400, detail="Query is required")

    top_k = request.top_k if request.top_k is not None else 5
    return await retrieval_service.search(request.query, presentation_id, top_k)
