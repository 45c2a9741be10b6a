import pytest

from core.http import session as session_module
from core.http.session import close_session, get_session


@pytest.fixture(autouse=True)
def _fresh_session_state():
    session_module._SessionState.session = None
    session_module._SessionState.loop = None
    yield
    session_module._SessionState.session = None
    session_module._SessionState.loop = None


@pytest.mark.asyncio
async def test_session_is_shared_within_a_loop() -> None:
    first = await get_session()
    try:
        assert await get_session() is first
        assert first.headers["Accept"] == "application/json"
    finally:
        await close_session()

    assert first.closed


@pytest.mark.asyncio
async def test_closed_session_is_replaced() -> None:
    first = await get_session()
    await first.close()

    second = await get_session()
    try:
        assert second is not first
        assert not second.closed
    finally:
        await close_session()


@pytest.mark.asyncio
async def test_session_from_another_loop_is_replaced() -> None:
    stale = object()
    session_module._SessionState.session = stale
    session_module._SessionState.loop = object()

    fresh = await get_session()
    try:
        assert fresh is not stale
    finally:
        await close_session()


@pytest.mark.asyncio
async def test_close_without_session_is_a_no_op() -> None:
    await close_session()

    assert session_module._SessionState.session is None
