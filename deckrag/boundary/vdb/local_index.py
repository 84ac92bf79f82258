"""
In-process vector index for development and tests.

Exact cosine search over numpy arrays, optionally persisted to a JSON
file after every mutation so a restarted dev server keeps its chunks.

Dependencies: numpy
System role: Local vector index backend (no external services)
"""

import json
import logging
import os
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence

import numpy as np

from deckrag.boundary.vdb.base import MetadataFilter, VectorIndex, validate_batch
from deckrag.boundary.vdb.vector_schemas import IndexDescription, VectorQueryResult
from deckrag.core.exceptions import VectorIndexConfigError, VectorIndexError

logger = logging.getLogger(__name__)


@dataclass
class _IndexData:
    dimension: int
    ids: list[str] = field(default_factory=list)
    vectors: list[list[float]] = field(default_factory=list)
    metadata: list[dict[str, Any]] = field(default_factory=list)


def _matches(metadata: dict[str, Any], filter: MetadataFilter | None) -> bool:
    if not filter:
        return True
    return all(metadata.get(key) == value for key, value in filter.items())


class LocalVectorIndex(VectorIndex):
    """
    Numpy-backed vector index.

    Every mutating call completes without awaiting, so concurrent
    coroutines never observe a half-applied batch.
    """

    def __init__(self, persist_path: str | os.PathLike | None = None) -> None:
        """
        Initialize local index.

        Args:
            persist_path: JSON file to load from and save to (memory only if None)
        """
        self._indexes: dict[str, _IndexData] = {}
        self._persist_path = Path(persist_path) if persist_path else None
        if self._persist_path and self._persist_path.exists():
            self._load()

    def _get(self, name: str, operation: str) -> _IndexData:
        data = self._indexes.get(name)
        if data is None:
            raise VectorIndexError(f"Index does not exist: {name}", operation=operation)
        return data

    async def create_index(self, name: str, dimension: int) -> None:
        existing = self._indexes.get(name)
        if existing is not None:
            if existing.dimension != dimension:
                raise VectorIndexConfigError(
                    f"Index {name} exists with dimension {existing.dimension}, requested {dimension}",
                    operation="create",
                )
            return

        self._indexes[name] = _IndexData(dimension=dimension)
        self._save()
        logger.info(
            f"{__name__}:create_index - Created index",
            extra={"index_name": name, "dimension": dimension},
        )

    async def describe_index(self, name: str) -> IndexDescription | None:
        data = self._indexes.get(name)
        if data is None:
            return None
        return IndexDescription(name=name, dimension=data.dimension)

    async def upsert(
        self,
        name: str,
        vectors: Sequence[Sequence[float]],
        metadata: Sequence[dict[str, Any]],
    ) -> list[str]:
        data = self._get(name, "upsert")
        validate_batch(vectors, metadata, data.dimension)

        ids = [str(uuid.uuid4()) for _ in vectors]
        data.ids.extend(ids)
        data.vectors.extend([float(x) for x in vector] for vector in vectors)
        data.metadata.extend(dict(entry) for entry in metadata)
        self._save()
        return ids

    async def query(
        self,
        name: str,
        vector: Sequence[float],
        top_k: int,
        filter: MetadataFilter | None = None,
    ) -> list[VectorQueryResult]:
        data = self._get(name, "query")
        if len(vector) != data.dimension:
            raise VectorIndexError(
                f"Query vector has dimension {len(vector)}, index expects {data.dimension}",
                operation="query",
            )
        if top_k < 1:
            return []

        positions = [i for i, entry in enumerate(data.metadata) if _matches(entry, filter)]
        if not positions:
            return []

        matrix = np.asarray([data.vectors[i] for i in positions], dtype=np.float64)
        query_vector = np.asarray(vector, dtype=np.float64)
        denominators = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query_vector)
        # zero-norm rows or query score 0 instead of NaN
        scores = np.divide(
            matrix @ query_vector,
            denominators,
            out=np.zeros(len(positions), dtype=np.float64),
            where=denominators > 0,
        )
        order = np.argsort(-scores, kind="stable")[:top_k]

        return [
            VectorQueryResult(
                id=data.ids[positions[i]],
                score=float(scores[i]),
                metadata=dict(data.metadata[positions[i]]),
            )
            for i in order
        ]

    async def delete_by_filter(self, name: str, filter: MetadataFilter) -> int:
        if not filter:
            raise VectorIndexError("Refusing to delete with an empty filter", operation="delete")
        data = self._get(name, "delete")

        keep = [i for i, entry in enumerate(data.metadata) if not _matches(entry, filter)]
        deleted = len(data.ids) - len(keep)
        if deleted:
            data.ids = [data.ids[i] for i in keep]
            data.vectors = [data.vectors[i] for i in keep]
            data.metadata = [data.metadata[i] for i in keep]
            self._save()
        return deleted

    def _save(self) -> None:
        if self._persist_path is None:
            return
        payload = {
            name: {
                "dimension": data.dimension,
                "records": [
                    {"id": record_id, "vector": vector, "metadata": entry}
                    for record_id, vector, entry in zip(data.ids, data.vectors, data.metadata)
                ],
            }
            for name, data in self._indexes.items()
        }
        self._persist_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._persist_path.with_suffix(self._persist_path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(payload), encoding="utf-8")
        os.replace(tmp_path, self._persist_path)

    def _load(self) -> None:
        payload = json.loads(self._persist_path.read_text(encoding="utf-8"))
        for name, raw in payload.items():
            data = _IndexData(dimension=int(raw["dimension"]))
            for record in raw.get("records", []):
                data.ids.append(record["id"])
                data.vectors.append(record["vector"])
                data.metadata.append(record["metadata"])
            self._indexes[name] = data
        logger.info(
            f"{__name__}:_load - Loaded local vector index",
            extra={"path": str(self._persist_path), "indexes": list(self._indexes)},
        )
