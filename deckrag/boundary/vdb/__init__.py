"""Vector index backends and embedding providers."""

from deckrag.boundary.vdb.base import MetadataFilter, VectorIndex
from deckrag.boundary.vdb.vector_schemas import IndexDescription, VectorQueryResult

__all__ = ["IndexDescription", "MetadataFilter", "VectorIndex", "VectorQueryResult"]
