"""Tests for DocumentLockRegistry."""

import asyncio

from deckrag.core.document_processing.locks import DocumentLockRegistry


class TestDocumentLockRegistry:
    """Test per-document serialization."""

    async def test_same_document_is_serialized(self):
        locks = DocumentLockRegistry()
        events: list[str] = []

        async def worker(name: str):
            async with locks.hold("doc-1"):
                events.append(f"{name}-start")
                await asyncio.sleep(0.01)
                events.append(f"{name}-end")

        await asyncio.gather(worker("a"), worker("b"))

        assert events == ["a-start", "a-end", "b-start", "b-end"]

    async def test_different_documents_run_concurrently(self):
        locks = DocumentLockRegistry()
        both_inside = asyncio.Event()
        inside = 0

        async def worker(document_id: str):
            nonlocal inside
            async with locks.hold(document_id):
                inside += 1
                if inside == 2:
                    both_inside.set()
                await asyncio.wait_for(both_inside.wait(), timeout=1)

        await asyncio.gather(worker("doc-1"), worker("doc-2"))

        assert both_inside.is_set()

    async def test_entries_released_after_use(self):
        locks = DocumentLockRegistry()

        async with locks.hold("doc-1"):
            assert locks.is_locked("doc-1")
            assert len(locks) == 1

        assert not locks.is_locked("doc-1")
        assert len(locks) == 0

    async def test_released_when_body_raises(self):
        locks = DocumentLockRegistry()

        try:
            async with locks.hold("doc-1"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass

        assert len(locks) == 0
