import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from core.auth import (
    CurrentUserId,
    resolve_signed_token,
    set_token_resolver,
    sign_user_token,
)
from core.exceptions import AuthenticationError


def _build_app() -> FastAPI:
    app = FastAPI()

    @app.get("/whoami")
    async def whoami(user_id: CurrentUserId) -> dict[str, str]:
        return {"user_id": user_id}

    return app


@pytest.mark.asyncio
async def test_signed_token_round_trip() -> None:
    token = sign_user_token("user.with.dots", "test-secret")

    assert await resolve_signed_token(token) == "user.with.dots"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "token",
    ["", "no-separator", ".abc", "u1.", "u1.deadbeef"],
)
async def test_bad_tokens_are_rejected(token: str) -> None:
    with pytest.raises(AuthenticationError):
        await resolve_signed_token(token)


@pytest.mark.asyncio
async def test_tokens_rejected_without_secret(monkeypatch) -> None:
    token = sign_user_token("u1", "test-secret")
    monkeypatch.delenv("AUTH_TOKEN_SECRET")

    with pytest.raises(AuthenticationError):
        await resolve_signed_token(token)


def test_dependency_resolves_user_from_header() -> None:
    client = TestClient(_build_app())
    token = sign_user_token("u1", "test-secret")

    response = client.get("/whoami", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json() == {"user_id": "u1"}


def test_dependency_rejects_missing_and_forged_tokens() -> None:
    client = TestClient(_build_app())
    forged = sign_user_token("u1", "other-secret")

    missing = client.get("/whoami")
    bad = client.get("/whoami", headers={"Authorization": f"Bearer {forged}"})

    assert missing.status_code == 401
    assert bad.status_code == 401
    assert bad.headers["www-authenticate"] == "Bearer"


def test_custom_resolver_can_be_installed() -> None:
    async def resolve(token: str) -> str:
        if token != "opaque-session":
            raise AuthenticationError("unknown session")
        return "session-user"

    set_token_resolver(resolve)
    client = TestClient(_build_app())

    ok = client.get("/whoami", headers={"Authorization": "Bearer opaque-session"})
    rejected = client.get("/whoami", headers={"Authorization": "Bearer other"})

    assert ok.json() == {"user_id": "session-user"}
    assert rejected.status_code == 401
