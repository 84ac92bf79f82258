"""
Vector index schemas.

Pydantic models returned by vector index backends.

Dependencies: pydantic
System role: Type definitions for vector operations
"""

from typing import Any

from pydantic import BaseModel, Field


class IndexDescription(BaseModel):
    """Shape of an existing index."""

    name: str = Field(description="Index name")
    dimension: int = Field(description="Vector dimension every record must have")


class VectorQueryResult(BaseModel):
    """Single result from a similarity query."""

    id: str = Field(description="Record identifier assigned at upsert")
    score: float = Field(description="Cosine similarity to the query vector (higher is closer)")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Metadata stored with the vector")
