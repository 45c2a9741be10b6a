"""Shared aiohttp session for outbound provider calls."""

from __future__ import annotations

import asyncio
import logging

import aiohttp

from core.constants import (
    HTTP_CONNECTION_LIMIT,
    HTTP_TIMEOUT_CONNECT,
    HTTP_TIMEOUT_SOCK_READ,
    HTTP_TIMEOUT_TOTAL,
    HTTP_USER_AGENT,
)

logger = logging.getLogger(__name__)


class _SessionState:
    session: aiohttp.ClientSession | None = None
    loop: asyncio.AbstractEventLoop | None = None


def _new_session() -> aiohttp.ClientSession:
    return aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(
            total=HTTP_TIMEOUT_TOTAL,
            connect=HTTP_TIMEOUT_CONNECT,
            sock_read=HTTP_TIMEOUT_SOCK_READ,
        ),
        headers={"User-Agent": HTTP_USER_AGENT, "Accept": "application/json"},
        connector=aiohttp.TCPConnector(limit=HTTP_CONNECTION_LIMIT),
    )


async def get_session() -> aiohttp.ClientSession:
    """
    Return the shared session for the running event loop.

    A session that was closed, or that belongs to a different loop (test
    clients and reloaders start fresh loops), is replaced.
    """
    loop = asyncio.get_running_loop()
    session = _SessionState.session
    if session is not None and _SessionState.loop is loop and not session.closed:
        return session

    if session is not None and _SessionState.loop is not loop:
        logger.info("Event loop changed; replacing HTTP session")
    _SessionState.session = _new_session()
    _SessionState.loop = loop
    return _SessionState.session


async def close_session() -> None:
    """Close the shared session if it belongs to the running loop."""
    session, owner = _SessionState.session, _SessionState.loop
    _SessionState.session = None
    _SessionState.loop = None
    if session is None or session.closed or owner is not asyncio.get_running_loop():
        return
    await session.close()
    logger.info("Closed HTTP session")
