import asyncio
from uuid import uuid4

from src.rsvps.locks import CategoryLocks


async def test_hold_serializes_same_category():
    locks = CategoryLocks()
    category_id = uuid4()
    events = []

    async def worker(name):
        async with locks.hold(category_id):
            events.append(f"{name}-in")
            await asyncio.sleep(0.01)
            events.append(f"{name}-out")

    await asyncio.gather(worker("a"), worker("b"))

    assert events in (["a-in", "a-out", "b-in", "b-out"], ["b-in", "b-out", "a-in", "a-out"])


async def test_hold_does_not_block_other_categories():
    locks = CategoryLocks()
    first, second = uuid4(), uuid4()

    async with locks.hold(first):
        # would deadlock if the categories shared a lock
        await asyncio.wait_for(_enter(locks, second), timeout=1)


async def _enter(locks, category_id):
    async with locks.hold(category_id):
        pass
