"""
Per-document lock registry.

Serializes processing, reprocessing and chunk deletion for the same
document within one process. Entries are dropped as soon as nobody holds
or waits on them.

Dependencies: asyncio
System role: Concurrency guard for document processing passes
"""

import asyncio
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncIterator


class DocumentLockRegistry:
    """asyncio.Lock per document ID with reference-counted cleanup."""

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: defaultdict[str, int] = defaultdict(int)

    @asynccontextmanager
    async def hold(self, document_id: str) -> AsyncIterator[None]:
        """Hold the lock for document_id for the duration of the block."""
        lock = self._locks.setdefault(document_id, asyncio.Lock())
        self._users[document_id] += 1
        try:
            async with lock:
                yield
        finally:
            self._users[document_id] -= 1
            if self._users[document_id] == 0:
                del self._users[document_id]
                del self._locks[document_id]

    def is_locked(self, document_id: str) -> bool:
        lock = self._locks.get(document_id)
        return lock is not None and lock.locked()

    def __len__(self) -> int:
        return len(self._locks)
