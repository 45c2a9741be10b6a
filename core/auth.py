"""Bearer-token authentication seam.

Route handlers depend on :func:`get_current_user_id`, which turns an
``Authorization: Bearer <token>`` header into an opaque user id. How a
token maps to a user is delegated to the installed ``TokenResolver``;
the default one accepts HMAC-signed tokens of the form
``<user_id>.<hex sha256 hmac of user_id>`` keyed by ``AUTH_TOKEN_SECRET``.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from config import get_auth_token_secret
from core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

TokenResolver = Callable[[str], Awaitable[str]]

_bearer = HTTPBearer(auto_error=False)


def sign_user_token(user_id: str, secret: str) -> str:
    """Build a token the default resolver will accept."""
    digest = hmac.new(secret.encode(), user_id.encode(), hashlib.sha256).hexdigest()
    return f"{user_id}.{digest}"


async def resolve_signed_token(token: str) -> str:
    secret = get_auth_token_secret()
    if not secret:
        msg = "Token authentication is not configured"
        raise AuthenticationError(msg)

    user_id, sep, signature = token.rpartition(".")
    if not sep or not user_id or not signature:
        msg = "Malformed bearer token"
        raise AuthenticationError(msg)

    expected = sign_user_token(user_id, secret).rpartition(".")[2]
    if not hmac.compare_digest(expected, signature):
        msg = "Invalid bearer token"
        raise AuthenticationError(msg)
    return user_id


class _ResolverState:
    resolver: TokenResolver = resolve_signed_token


def set_token_resolver(resolver: TokenResolver | None) -> None:
    """Install a custom resolver; ``None`` restores the signed-token default."""
    _ResolverState.resolver = resolver or resolve_signed_token


async def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer)],
) -> str:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return await _ResolverState.resolver(credentials.credentials)
    except AuthenticationError as e:
        logger.info("Rejected bearer token: %s", e.message)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


CurrentUserId = Annotated[str, Depends(get_current_user_id)]
