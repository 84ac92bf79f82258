"""
PostgreSQL + pgvector index for production retrieval.

Each named index is a table with an ``embedding vector(dim)`` column and
a JSONB ``metadata`` column. Filters use JSONB containment, similarity is
cosine (HNSW index), and counts are native ``COUNT(*)``.

A multi-row upsert is executed inside one transaction, so a batch either
lands completely or not at all.

Dependencies: sqlalchemy, asyncpg, pgvector, tenacity
System role: Production vector index backend
"""

import logging
import math
import re
import uuid
from typing import Any, Sequence

from pgvector.sqlalchemy import Vector
from sqlalchemy import Column, MetaData, String, Table, delete, func, insert, select, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine
from sqlalchemy.sql import Select
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from deckrag.boundary.vdb.base import MetadataFilter, VectorIndex, validate_batch
from deckrag.boundary.vdb.vector_schemas import IndexDescription, VectorQueryResult
from deckrag.core.exceptions import VectorIndexConfigError, VectorIndexError

logger = logging.getLogger(__name__)

_INDEX_NAME_PATTERN = re.compile(r"^[a-z_][a-z0-9_]{0,62}$")

_EXISTING_DIMENSION_SQL = text(
    """
    SELECT a.atttypmod
    FROM pg_attribute a
    JOIN pg_class c ON a.attrelid = c.oid
    JOIN pg_namespace n ON c.relnamespace = n.oid
    WHERE c.relname = :table_name
      AND n.nspname = current_schema()
      AND a.attname = 'embedding'
      AND NOT a.attisdropped
    """
)


def validate_index_name(name: str) -> str:
    """
    Ensure an index name is usable as an unquoted table identifier.

    Raises:
        VectorIndexConfigError: Name contains anything but lowercase letters, digits, underscores
    """
    if not _INDEX_NAME_PATTERN.match(name):
        raise VectorIndexConfigError(f"Invalid index name: {name!r}", operation="create")
    return name


def build_table(name: str, dimension: int, metadata: MetaData) -> Table:
    """Describe the table backing one index."""
    return Table(
        name,
        metadata,
        Column("id", String(36), primary_key=True),
        Column("embedding", Vector(dimension), nullable=False),
        Column("metadata", JSONB, nullable=False),
        extend_existing=True,
    )


def build_query_statement(
    table: Table,
    vector: Sequence[float],
    top_k: int,
    filter: MetadataFilter | None = None,
) -> Select:
    """Nearest-neighbour query ordered by cosine distance."""
    distance = table.c.embedding.cosine_distance(list(vector)).label("distance")
    stmt = select(table.c.id, table.c["metadata"], distance).order_by(distance).limit(top_k)
    if filter:
        stmt = stmt.where(table.c["metadata"].contains(filter))
    return stmt


def build_count_statement(table: Table, filter: MetadataFilter | None = None) -> Select:
    """Native row count restricted by metadata containment."""
    stmt = select(func.count()).select_from(table)
    if filter:
        stmt = stmt.where(table.c["metadata"].contains(filter))
    return stmt


def _similarity(distance: float | None) -> float:
    # pgvector yields NaN cosine distance for a zero-norm vector
    if distance is None or math.isnan(distance):
        return 0.0
    return 1.0 - float(distance)


class PgVectorIndex(VectorIndex):
    """Vector index stored in PostgreSQL tables using the pgvector extension."""

    def __init__(self, engine: AsyncEngine) -> None:
        """
        Initialize pgvector index.

        Args:
            engine: Async engine owned by this index (disposed on close)
        """
        self._engine = engine
        self._metadata = MetaData()
        self._tables: dict[str, Table] = {}

    async def _existing_dimension(self, conn: AsyncConnection, name: str) -> int | None:
        result = await conn.execute(_EXISTING_DIMENSION_SQL, {"table_name": name})
        row = result.first()
        return int(row[0]) if row is not None else None

    async def _table(self, name: str, operation: str) -> Table:
        table = self._tables.get(name)
        if table is not None:
            return table
        description = await self.describe_index(name)
        if description is None:
            raise VectorIndexError(f"Index does not exist: {name}", operation=operation)
        return self._tables[name]

    async def create_index(self, name: str, dimension: int) -> None:
        validate_index_name(name)
        try:
            async with self._engine.begin() as conn:
                await conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
                existing = await self._existing_dimension(conn, name)
                if existing is not None:
                    if existing != dimension:
                        raise VectorIndexConfigError(
                            f"Index {name} exists with dimension {existing}, requested {dimension}",
                            operation="create",
                        )
                    self._tables[name] = build_table(name, existing, self._metadata)
                    return

                table = build_table(name, dimension, self._metadata)
                await conn.run_sync(table.create, checkfirst=True)
                await conn.execute(
                    text(
                        f"CREATE INDEX IF NOT EXISTS {name}_embedding_hnsw "
                        f"ON {name} USING hnsw (embedding vector_cosine_ops)"
                    )
                )
                await conn.execute(
                    text(
                        f"CREATE INDEX IF NOT EXISTS {name}_metadata_gin "
                        f"ON {name} USING gin (metadata jsonb_path_ops)"
                    )
                )
                self._tables[name] = table
        except SQLAlchemyError as e:
            logger.exception(f"{__name__}:create_index - Failed", extra={"index_name": name})
            raise VectorIndexError(f"Failed to create index {name}: {e}", operation="create") from e

        logger.info(
            f"{__name__}:create_index - Created index",
            extra={"index_name": name, "dimension": dimension},
        )

    async def describe_index(self, name: str) -> IndexDescription | None:
        validate_index_name(name)
        try:
            async with self._engine.connect() as conn:
                dimension = await self._existing_dimension(conn, name)
        except SQLAlchemyError as e:
            raise VectorIndexError(f"Failed to describe index {name}: {e}", operation="describe") from e
        if dimension is None:
            return None
        if name not in self._tables:
            self._tables[name] = build_table(name, dimension, self._metadata)
        return IndexDescription(name=name, dimension=dimension)

    async def upsert(
        self,
        name: str,
        vectors: Sequence[Sequence[float]],
        metadata: Sequence[dict[str, Any]],
    ) -> list[str]:
        table = await self._table(name, "upsert")
        validate_batch(vectors, metadata, table.c.embedding.type.dim)
        if not vectors:
            return []

        ids = [str(uuid.uuid4()) for _ in vectors]
        rows = [
            {"id": record_id, "embedding": list(vector), "metadata": dict(entry)}
            for record_id, vector, entry in zip(ids, vectors, metadata)
        ]
        try:
            async with self._engine.begin() as conn:
                await conn.execute(insert(table), rows)
        except SQLAlchemyError as e:
            logger.exception(
                f"{__name__}:upsert - Batch rolled back",
                extra={"index_name": name, "record_count": len(rows)},
            )
            raise VectorIndexError(f"Failed to upsert into {name}: {e}", operation="upsert") from e
        return ids

    @retry(
        retry=retry_if_exception_type(OperationalError),
        stop=stop_after_attempt(3),
        wait=wait_exponential_jitter(initial=0.5, max=5, jitter=0.5),
        before_sleep=lambda retry_state: logger.warning(
            f"{__name__}:_fetch - Retry {retry_state.attempt_number}/3 after connection error"
        ),
        reraise=True,
    )
    async def _fetch(self, stmt: Select) -> list[Any]:
        async with self._engine.connect() as conn:
            result = await conn.execute(stmt)
            return list(result.all())

    async def query(
        self,
        name: str,
        vector: Sequence[float],
        top_k: int,
        filter: MetadataFilter | None = None,
    ) -> list[VectorQueryResult]:
        table = await self._table(name, "query")
        if len(vector) != table.c.embedding.type.dim:
            raise VectorIndexError(
                f"Query vector has dimension {len(vector)}, index expects {table.c.embedding.type.dim}",
                operation="query",
            )
        if top_k < 1:
            return []
        try:
            rows = await self._fetch(build_query_statement(table, vector, top_k, filter))
        except SQLAlchemyError as e:
            raise VectorIndexError(f"Failed to query {name}: {e}", operation="query") from e

        return [
            VectorQueryResult(
                id=row._mapping["id"],
                score=_similarity(row._mapping["distance"]),
                metadata=row._mapping["metadata"],
            )
            for row in rows
        ]

    async def delete_by_filter(self, name: str, filter: MetadataFilter) -> int:
        if not filter:
            raise VectorIndexError("Refusing to delete with an empty filter", operation="delete")
        table = await self._table(name, "delete")
        try:
            async with self._engine.begin() as conn:
                result = await conn.execute(delete(table).where(table.c["metadata"].contains(filter)))
        except SQLAlchemyError as e:
            raise VectorIndexError(f"Failed to delete from {name}: {e}", operation="delete") from e
        return result.rowcount

    async def count_by_filter(self, name: str, filter: MetadataFilter, limit: int = 0) -> int:
        """Exact count; limit is accepted for interface parity and ignored."""
        table = await self._table(name, "count")
        try:
            rows = await self._fetch(build_count_statement(table, filter))
        except SQLAlchemyError as e:
            raise VectorIndexError(f"Failed to count {name}: {e}", operation="count") from e
        return int(rows[0][0])

    async def close(self) -> None:
        await self._engine.dispose()
