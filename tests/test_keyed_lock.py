import asyncio

import pytest

from core.locks import KeyedLock


@pytest.mark.asyncio
async def test_same_key_is_serialized() -> None:
    locks = KeyedLock()
    active = 0
    peak = 0

    async def worker() -> None:
        nonlocal active, peak
        async with locks.hold("user-1"):
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1

    await asyncio.gather(*(worker() for _ in range(5)))

    assert peak == 1
    assert len(locks) == 0


@pytest.mark.asyncio
async def test_different_keys_do_not_block_each_other() -> None:
    locks = KeyedLock()
    entered = asyncio.Event()

    async def holder() -> None:
        async with locks.hold("a"):
            entered.set()
            await asyncio.sleep(0.05)

    task = asyncio.create_task(holder())
    await entered.wait()

    assert locks.is_locked("a")
    async with asyncio.timeout(0.02):
        async with locks.hold("b"):
            assert locks.is_locked("a")
            assert locks.is_locked("b")

    await task
    assert len(locks) == 0


@pytest.mark.asyncio
async def test_lock_entry_released_after_error() -> None:
    locks = KeyedLock()

    with pytest.raises(RuntimeError):
        async with locks.hold("k"):
            raise RuntimeError("boom")

    assert len(locks) == 0
    assert not locks.is_locked("k")
