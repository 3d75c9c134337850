"""Tests for middleware — security headers, request IDs, rate limiting.

Learn: Redis isn't running in tests, so the rate limiter is exercised
with a tiny in-test fake that implements incr/expire.
"""

import pytest

from conftest import company_body


@pytest.mark.asyncio
async def test_security_headers_on_health(client):
    r = await client.get("/api/v1/health")
    assert r.status_code == 200
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"
    assert r.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
    assert "Cache-Control" not in r.headers


@pytest.mark.asyncio
async def test_token_responses_not_cached(client):
    r = await client.post("/api/v1/register", json=company_body())
    assert r.headers["Cache-Control"] == "no-store"


@pytest.mark.asyncio
async def test_no_hsts_on_http(client):
    r = await client.get("/api/v1/health")
    assert "Strict-Transport-Security" not in r.headers


@pytest.mark.asyncio
async def test_request_id_generated(client):
    r1 = await client.get("/api/v1/health")
    r2 = await client.get("/api/v1/health")
    assert r1.headers["X-Request-ID"] != r2.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_propagated(client):
    r = await client.get("/api/v1/health", headers={"X-Request-ID": "trace-12345"})
    assert r.headers["X-Request-ID"] == "trace-12345"


@pytest.mark.asyncio
async def test_error_responses_use_envelope(client):
    r = await client.get("/api/v1/does-not-exist")
    assert r.status_code == 404
    assert r.json() == {
        "statusCode": 404,
        "data": None,
        "message": "Not Found",
        "success": False,
        "errors": [],
    }


class _FakeRedis:
    def __init__(self):
        self.counts: dict[str, int] = {}

    async def incr(self, key: str) -> int:
        self.counts[key] = self.counts.get(key, 0) + 1
        return self.counts[key]

    async def expire(self, key: str, seconds: int) -> None:
        pass


@pytest.mark.asyncio
async def test_rate_limit_on_login(client, monkeypatch):
    from tenantauth import redis as redis_module
    from tenantauth.config import settings

    monkeypatch.setattr(redis_module, "_redis", _FakeRedis())

    statuses = []
    for _ in range(settings.rate_limit_auth_rpm + 1):
        r = await client.post("/api/v1/login", json={})
        statuses.append(r.status_code)

    assert statuses[:-1] == [400] * settings.rate_limit_auth_rpm
    assert statuses[-1] == 429
    assert r.json()["success"] is False


@pytest.mark.asyncio
async def test_rate_limit_headers(client, monkeypatch):
    from tenantauth import redis as redis_module

    monkeypatch.setattr(redis_module, "_redis", _FakeRedis())
    r = await client.get("/api/v1/health")
    assert r.headers["X-RateLimit-Limit"] == "100"
    assert r.headers["X-RateLimit-Remaining"] == "99"
