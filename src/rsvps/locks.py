import asyncio
import contextlib
from collections.abc import AsyncIterator
from uuid import UUID


class CategoryLocks:
    """One asyncio lock per category id.

    Held across the read-aggregate, decide, write and commit of a single
    request so two requests in this process never decide on the same stale
    aggregate. Cross-process ordering comes from the category row lock taken
    inside the transaction.
    """

    def __init__(self) -> None:
        self._locks: dict[UUID, asyncio.Lock] = {}

    def _lock_for(self, category_id: UUID) -> asyncio.Lock:
        lock = self._locks.get(category_id)
        if lock is None:
            lock = self._locks[category_id] = asyncio.Lock()
        return lock

    @contextlib.asynccontextmanager
    async def hold(self, category_id: UUID) -> AsyncIterator[None]:
        async with self._lock_for(category_id):
            yield


category_locks = CategoryLocks()
