"""
Analytics store tests: tracking, anonymization and aggregate queries
"""
from datetime import datetime, timedelta, timezone

import pytest

from conftest import API
from portfolio.core.config import get_settings
from portfolio.domains.analytics.entities import anonymize_ip, detect_device
from portfolio.domains.analytics.services import AnalyticsService


@pytest.mark.parametrize("ip, expected", [
    ("203.0.113.45", "203.0.0.0"),
    ("10.1.2.3", "10.1.0.0"),
    ("::ffff:192.168.10.20", "192.168.0.0"),
    ("2001:db8::1", "anonymous"),
    ("garbage", "anonymous"),
    ("", "anonymous"),
    (None, "anonymous"),
])
def test_anonymize_ip(ip, expected):
    assert anonymize_ip(ip) == expected


@pytest.mark.parametrize("user_agent, expected", [
    ("Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X)", "mobile"),
    ("Mozilla/5.0 (Linux; Android 14; Pixel 8)", "mobile"),
    ("Mozilla/5.0 (iPad; CPU OS 17_0 like Mac OS X)", "tablet"),
    ("Mozilla/5.0 (Windows NT 10.0; Win64; x64)", "desktop"),
    ("", "desktop"),
])
def test_detect_device(user_agent, expected):
    assert detect_device(user_agent) == expected


async def track(client, page, session_id=None, **headers):
    body = {"page": page}
    if session_id:
        body["sessionId"] = session_id
    response = await client.post(f"{API}/analytics/track", json=body, headers=headers)
    assert response.status_code == 200
    return response.json()["data"]["sessionId"]


async def test_track_generates_session_id(client):
    session_id = await track(client, "/")

    assert session_id
    assert len(session_id) == 36


async def test_track_anonymizes_ip_and_accumulates_pages(client, database, monkeypatch):
    monkeypatch.setenv("TRUST_PROXY", "true")
    get_settings.cache_clear()
    proxied = {"X-Forwarded-For": "198.51.100.7, 203.0.113.45"}

    session_id = await track(client, "/", **proxied)
    async with database.session_factory() as session:
        first = await AnalyticsService(session).get_session(session_id)
    assert first.ip_address == "203.0.0.0"

    await track(client, "/projects", session_id, **proxied)
    await track(client, "/about", session_id, **proxied, **{"User-Agent": "Mozilla/5.0 (iPhone)"})

    async with database.session_factory() as session:
        visitor = await AnalyticsService(session).get_session(session_id)
    assert visitor.ip_address == "203.0.0.0"
    assert [p.path for p in visitor.pages] == ["/", "/projects", "/about"]
    assert visitor.first_visit == first.first_visit
    assert visitor.last_visit >= first.last_visit
    assert visitor.device == "mobile"


async def test_track_updates_ip_and_referrer_on_every_event(client, database, monkeypatch):
    monkeypatch.setenv("TRUST_PROXY", "true")
    get_settings.cache_clear()

    body = {"page": "/", "referrer": "https://news.example.com/"}
    response = await client.post(
        f"{API}/analytics/track", json=body, headers={"X-Forwarded-For": "203.0.113.45"}
    )
    session_id = response.json()["data"]["sessionId"]
    await track(client, "/about", session_id)

    async with database.session_factory() as session:
        visitor = await AnalyticsService(session).get_session(session_id)
    # второй запрос пришел напрямую от транспорта тестового клиента
    assert visitor.ip_address == "127.0.0.0"
    assert visitor.referrer == ""


async def test_track_ignores_forwarded_header_without_trusted_proxy(client, database):
    session_id = await track(client, "/", **{"X-Forwarded-For": "203.0.113.45"})

    async with database.session_factory() as session:
        visitor = await AnalyticsService(session).get_session(session_id)
    assert visitor.ip_address == "127.0.0.0"


async def test_track_failure_still_answers_success(client, monkeypatch):
    async def broken(self, **kwargs):
        raise RuntimeError("store unavailable")

    monkeypatch.setattr(AnalyticsService, "record_page_view", broken)

    response = await client.post(f"{API}/analytics/track", json={"page": "/", "sessionId": "abc"})

    assert response.status_code == 200
    assert response.json()["data"] == {"sessionId": "abc"}


async def test_track_requires_page(client):
    response = await client.post(f"{API}/analytics/track", json={"referrer": ""})

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "page"


async def test_admin_endpoints_require_token(client, admin_user):
    for path in ("stats", "visitors", "popular-pages", "trend"):
        response = await client.get(f"{API}/analytics/{path}")
        assert response.status_code == 401


async def test_stats_summary(client, auth_headers):
    first = await track(client, "/")
    await track(client, "/projects", first)
    await track(client, "/projects")

    response = await client.get(f"{API}/analytics/stats", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()["data"]
    expected = {"totalVisitors": 2, "totalPageViews": 3, "uniquePages": 2}
    assert data["overall"] == expected
    assert data["today"] == expected
    assert data["thisWeek"] == expected
    assert data["thisMonth"] == expected


async def test_stats_respects_date_range(client, auth_headers):
    await track(client, "/")
    future = (datetime.now(timezone.utc) + timedelta(days=1)).isoformat()

    response = await client.get(f"{API}/analytics/stats", params={"startDate": future}, headers=auth_headers)

    assert response.json()["data"]["overall"] == {"totalVisitors": 0, "totalPageViews": 0, "uniquePages": 0}


async def test_popular_pages(client, auth_headers):
    for _ in range(3):
        await track(client, "/projects")
    await track(client, "/about")

    response = await client.get(f"{API}/analytics/popular-pages", params={"limit": 1}, headers=auth_headers)

    assert response.json()["data"]["popularPages"] == [{"path": "/projects", "views": 3}]


async def test_visitors_are_paginated_newest_first(client, auth_headers):
    older = await track(client, "/")
    newer = await track(client, "/about")

    response = await client.get(f"{API}/analytics/visitors", params={"limit": 1}, headers=auth_headers)

    data = response.json()["data"]
    assert data["pagination"] == {"page": 1, "limit": 1, "total": 2, "totalPages": 2}
    assert [v["sessionId"] for v in data["visitors"]] == [newer]
    assert data["visitors"][0]["pages"][0]["path"] == "/about"
    assert older != newer


async def test_trend_by_session(client, auth_headers):
    session_id = await track(client, "/")
    await track(client, "/projects", session_id)
    await track(client, "/about")

    response = await client.get(f"{API}/analytics/trend", params={"days": 7}, headers=auth_headers)

    today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    assert response.json()["data"]["trend"] == [{"date": today, "visitors": 2, "pageViews": 3}]


async def test_trend_by_activity(client, auth_headers):
    session_id = await track(client, "/")
    await track(client, "/projects", session_id)

    response = await client.get(
        f"{API}/analytics/trend", params={"days": 7, "basis": "activity"}, headers=auth_headers
    )

    today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    assert response.json()["data"]["trend"] == [{"date": today, "visitors": 1, "pageViews": 2}]


async def test_trend_rejects_unknown_basis(client, auth_headers):
    response = await client.get(f"{API}/analytics/trend", params={"basis": "weekly"}, headers=auth_headers)

    assert response.status_code == 400
