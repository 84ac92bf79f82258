"""Tests for LocalVectorIndex and the shared count_by_filter probe."""

import pytest

from deckrag.boundary.vdb.local_index import LocalVectorIndex
from deckrag.core.exceptions import VectorIndexConfigError, VectorIndexError


def _meta(document_id: str, presentation_id: str = "pres-1", chunk_index: int = 0) -> dict:
    return {
        "documentId": document_id,
        "presentationId": presentation_id,
        "fileName": f"{document_id}.txt",
        "chunkIndex": chunk_index,
        "text": f"chunk {chunk_index} of {document_id}",
    }


@pytest.fixture
async def index():
    """Local index with a 3-dimensional 'chunks' index."""
    local = LocalVectorIndex()
    await local.create_index("chunks", 3)
    return local


class TestCreateIndex:
    """Test index lifecycle."""

    async def test_create_is_idempotent(self, index):
        await index.upsert("chunks", [[1.0, 0.0, 0.0]], [_meta("doc-1")])

        await index.create_index("chunks", 3)

        description = await index.describe_index("chunks")
        assert description.dimension == 3
        assert await index.count_by_filter("chunks", {"documentId": "doc-1"}) == 1

    async def test_dimension_conflict(self, index):
        with pytest.raises(VectorIndexConfigError):
            await index.create_index("chunks", 4)

    async def test_describe_unknown_index(self, index):
        assert await index.describe_index("other") is None

    async def test_operations_on_unknown_index_raise(self, index):
        with pytest.raises(VectorIndexError):
            await index.query("other", [1.0, 0.0, 0.0], top_k=1)
        with pytest.raises(VectorIndexError):
            await index.count_by_filter("other", {"documentId": "doc-1"})


class TestUpsert:
    """Test record writes."""

    async def test_returns_generated_ids(self, index):
        ids = await index.upsert(
            "chunks",
            [[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]],
            [_meta("doc-1", chunk_index=0), _meta("doc-1", chunk_index=1)],
        )

        assert len(ids) == 2
        assert len(set(ids)) == 2

    async def test_no_deduplication(self, index):
        await index.upsert("chunks", [[1.0, 0.0, 0.0]], [_meta("doc-1")])
        await index.upsert("chunks", [[1.0, 0.0, 0.0]], [_meta("doc-1")])

        assert await index.count_by_filter("chunks", {"documentId": "doc-1"}) == 2

    async def test_bad_batch_writes_nothing(self, index):
        with pytest.raises(VectorIndexError):
            await index.upsert(
                "chunks",
                [[1.0, 0.0, 0.0], [1.0, 0.0]],
                [_meta("doc-1", chunk_index=0), _meta("doc-1", chunk_index=1)],
            )

        assert await index.count_by_filter("chunks", {"documentId": "doc-1"}) == 0

    async def test_length_mismatch(self, index):
        with pytest.raises(VectorIndexError):
            await index.upsert("chunks", [[1.0, 0.0, 0.0]], [])


class TestQuery:
    """Test filtered similarity search."""

    async def test_orders_by_cosine_similarity(self, index):
        await index.upsert(
            "chunks",
            [[0.0, 1.0, 0.0], [1.0, 0.0, 0.0], [1.0, 1.0, 0.0]],
            [_meta("far"), _meta("exact"), _meta("near")],
        )

        results = await index.query("chunks", [2.0, 0.0, 0.0], top_k=3)

        assert [r.metadata["documentId"] for r in results] == ["exact", "near", "far"]
        assert results[0].score == pytest.approx(1.0)
        assert results[1].score == pytest.approx(0.70710678)
        assert results[2].score == pytest.approx(0.0)

    async def test_filter_restricts_partition(self, index):
        await index.upsert(
            "chunks",
            [[1.0, 0.0, 0.0], [1.0, 0.0, 0.0]],
            [_meta("doc-a", presentation_id="pres-1"), _meta("doc-b", presentation_id="pres-2")],
        )

        results = await index.query("chunks", [1.0, 0.0, 0.0], top_k=10, filter={"presentationId": "pres-2"})

        assert [r.metadata["documentId"] for r in results] == ["doc-b"]

    async def test_top_k_limits_results(self, index):
        await index.upsert("chunks", [[1.0, 0.0, 0.0]] * 5, [_meta("doc-1", chunk_index=i) for i in range(5)])

        assert len(await index.query("chunks", [1.0, 0.0, 0.0], top_k=2)) == 2
        assert await index.query("chunks", [1.0, 0.0, 0.0], top_k=0) == []

    async def test_zero_vector_query_scores_zero(self, index):
        await index.upsert("chunks", [[1.0, 0.0, 0.0]], [_meta("doc-1")])

        [result] = await index.query("chunks", [0.0, 0.0, 0.0], top_k=1)

        assert result.score == 0.0

    async def test_wrong_query_dimension(self, index):
        with pytest.raises(VectorIndexError):
            await index.query("chunks", [1.0, 0.0], top_k=1)


class TestDeleteAndCount:
    """Test filtered delete and the zero-vector count probe."""

    async def test_delete_by_filter(self, index):
        await index.upsert(
            "chunks",
            [[1.0, 0.0, 0.0]] * 3,
            [_meta("doc-1", chunk_index=0), _meta("doc-1", chunk_index=1), _meta("doc-2")],
        )

        assert await index.delete_by_filter("chunks", {"documentId": "doc-1"}) == 2
        assert await index.count_by_filter("chunks", {"documentId": "doc-1"}) == 0
        assert await index.count_by_filter("chunks", {"documentId": "doc-2"}) == 1

    async def test_delete_requires_filter(self, index):
        with pytest.raises(VectorIndexError):
            await index.delete_by_filter("chunks", {})

    async def test_count_saturates_at_limit(self, index):
        await index.upsert("chunks", [[1.0, 0.0, 0.0]] * 5, [_meta("doc-1", chunk_index=i) for i in range(5)])

        assert await index.count_by_filter("chunks", {"documentId": "doc-1"}, limit=3) == 3


async def test_persists_across_instances(tmp_path):
    path = tmp_path / "index.json"
    first = LocalVectorIndex(persist_path=path)
    await first.create_index("chunks", 3)
    await first.upsert("chunks", [[1.0, 0.0, 0.0]], [_meta("doc-1")])

    second = LocalVectorIndex(persist_path=path)

    assert (await second.describe_index("chunks")).dimension == 3
    [result] = await second.query("chunks", [1.0, 0.0, 0.0], top_k=1)
    assert result.metadata == _meta("doc-1")
