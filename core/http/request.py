"""JSON GET helper with consistent error mapping for provider clients."""

from __future__ import annotations

import json
import logging
from typing import Any

from core.exceptions import ExternalServiceException

logger = logging.getLogger(__name__)

_PREVIEW_CHARS = 300


async def get_json(
    url: str,
    *,
    session: Any,
    params: dict[str, Any] | None = None,
    service_name: str = "Service",
) -> Any:
    """GET ``url`` and decode the JSON body.

    A non-200 status or an undecodable body raises ExternalServiceException
    with the status and a body preview attached.
    """
    async with session.get(url, params=params) as response:
        body = await response.text()
        logger.debug(
            "%s responded %s: %s",
            service_name,
            response.status,
            body[:_PREVIEW_CHARS],
        )
        if response.status != 200:
            msg = f"{service_name} error: {response.status}"
            raise ExternalServiceException(
                msg,
                {
                    "status": response.status,
                    "body": body[:_PREVIEW_CHARS],
                    "url": str(getattr(response, "url", url)),
                },
            )
        try:
            return json.loads(body)
        except ValueError as exc:
            msg = f"{service_name} error: invalid JSON"
            raise ExternalServiceException(
                msg,
                {"body": body[:_PREVIEW_CHARS], "url": url},
            ) from exc
