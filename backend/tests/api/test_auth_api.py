import pytest
from httpx import ASGITransport, AsyncClient

from antiques_trail.api.deps import get_session
from antiques_trail.core.config import settings
from antiques_trail.core.security import get_password_hash
from antiques_trail.main import app

API = "/api/v1"


async def test_login_unavailable_without_password_hash(client: AsyncClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "admin_password_hash", None)
    response = await client.post(f"{API}/auth/token", json={"password": "anything"})
    assert response.status_code == 503


async def test_login_issues_working_token(client: AsyncClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "admin_password_hash", get_password_hash("correct horse"))

    assert (await client.post(f"{API}/auth/token", json={"password": "wrong"})).status_code == 401

    response = await client.post(f"{API}/auth/token", json={"password": "correct horse"})
    assert response.status_code == 200
    token = response.json()
    assert token["token_type"] == "bearer"
    assert token["expires_in"] == settings.access_token_expire_minutes * 60

    headers = {"Authorization": f"Bearer {token['access_token']}"}
    response = await client.post(f"{API}/place-types", json={"name": "Auction House"}, headers=headers)
    assert response.status_code == 201


async def test_health_endpoints(client: AsyncClient) -> None:
    assert (await client.get(f"{API}/healthz")).json() == {"status": "ok"}
    assert (await client.get(f"{API}/readyz")).status_code == 200


async def test_unhandled_errors_return_error_id() -> None:
    async def broken_session():
        raise RuntimeError("database exploded")
        yield  # pragma: no cover

    app.dependency_overrides[get_session] = broken_session
    try:
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get(f"{API}/places")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    body = response.json()
    assert body["detail"] == "Internal server error"
    assert len(body["error_id"]) == 12
