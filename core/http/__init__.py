"""Shared aiohttp session, JSON GET helper and retry policy."""

from core.http.request import get_json
from core.http.retry import retry_async
from core.http.session import close_session, get_session

__all__ = [
    "close_session",
    "get_json",
    "get_session",
    "retry_async",
]
