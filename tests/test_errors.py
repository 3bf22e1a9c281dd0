"""
Error envelope, unknown routes and rate limiting tests
"""
from httpx import ASGITransport, AsyncClient

from conftest import ADMIN, API
from portfolio.core.config import get_settings
from portfolio.core.rate_limit import limiter


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


async def test_unknown_route_uses_envelope(client):
    response = await client.get(f"{API}/nothing-here")

    assert response.status_code == 404
    assert response.json() == {"status": "fail", "message": f"Route {API}/nothing-here not found"}


async def test_invalid_uuid_is_validation_error(client):
    response = await client.post(f"{API}/projects/not-a-uuid/view")

    assert response.status_code == 400
    body = response.json()
    assert body["status"] == "fail"
    assert body["errors"][0]["field"] == "project_id"


async def test_unhandled_error_hides_stack_outside_development(app):
    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {"status": "error", "message": "Something went wrong"}


async def test_unhandled_error_includes_stack_in_development(app, monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "development")
    get_settings.cache_clear()

    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/boom")

    body = response.json()
    assert response.status_code == 500
    assert body["status"] == "error"
    assert "RuntimeError: kaboom" in body["stack"]


async def test_login_is_rate_limited(client, admin_user, monkeypatch):
    monkeypatch.setenv("LOGIN_RATE_LIMIT", "2/minute")
    get_settings.cache_clear()
    limiter.enabled = True
    limiter.reset()

    credentials = {"email": ADMIN["email"], "password": "wrong-password"}
    statuses = [
        (await client.post(f"{API}/auth/login", json=credentials)).status_code
        for _ in range(3)
    ]

    assert statuses == [401, 401, 429]
    response = await client.post(f"{API}/auth/login", json=credentials)
    assert response.json()["status"] == "fail"


async def test_login_limit_ignores_client_supplied_forwarded_for(client, admin_user, monkeypatch):
    monkeypatch.setenv("LOGIN_RATE_LIMIT", "2/minute")
    get_settings.cache_clear()
    limiter.enabled = True
    limiter.reset()

    credentials = {"email": ADMIN["email"], "password": "wrong-password"}
    statuses = [
        (await client.post(
            f"{API}/auth/login", json=credentials, headers={"X-Forwarded-For": f"198.51.100.{i}"}
        )).status_code
        for i in range(5)
    ]

    assert statuses == [401, 401, 429, 429, 429]


async def test_login_limit_behind_proxy_keys_on_proxy_added_hop(client, admin_user, monkeypatch):
    monkeypatch.setenv("LOGIN_RATE_LIMIT", "2/minute")
    monkeypatch.setenv("TRUST_PROXY", "true")
    get_settings.cache_clear()
    limiter.enabled = True
    limiter.reset()

    credentials = {"email": ADMIN["email"], "password": "wrong-password"}
    statuses = [
        (await client.post(
            f"{API}/auth/login",
            json=credentials,
            headers={"X-Forwarded-For": f"198.51.100.{i}, 203.0.113.9"},
        )).status_code
        for i in range(4)
    ]

    assert statuses == [401, 401, 429, 429]


async def test_auth_routes_share_one_limit(client, admin_user, monkeypatch):
    monkeypatch.setenv("LOGIN_RATE_LIMIT", "3/minute")
    get_settings.cache_clear()
    limiter.enabled = True
    limiter.reset()

    logout = await client.post(f"{API}/auth/logout")
    refresh = await client.post(f"{API}/auth/refresh")
    login = await client.post(f"{API}/auth/login", json={"email": ADMIN["email"], "password": "nope"})
    blocked = await client.post(f"{API}/auth/logout")

    assert [logout.status_code, refresh.status_code, login.status_code] == [200, 401, 401]
    assert blocked.status_code == 429


async def test_track_is_rate_limited(client, monkeypatch):
    monkeypatch.setenv("TRACK_RATE_LIMIT", "3/minute")
    get_settings.cache_clear()
    limiter.enabled = True
    limiter.reset()

    statuses = [
        (await client.post(f"{API}/analytics/track", json={"page": "/"})).status_code
        for _ in range(4)
    ]

    assert statuses == [200, 200, 200, 429]
    # лимит трекинга не расходует лимит авторизации
    assert (await client.post(f"{API}/auth/logout")).status_code == 200
