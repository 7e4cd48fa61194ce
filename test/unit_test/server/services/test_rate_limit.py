"""Unit tests for the fixed-window rate limiter and its FastAPI dependency."""

import time
from typing import List

import pytest
from fastapi import Depends, FastAPI
from httpx import ASGITransport, AsyncClient
from limits.storage import MemoryStorage
from starlette.requests import Request

from herit.server.exception_handlers import setup_exception_handlers
from herit.server.services.rate_limit import (
    RateLimiter,
    RateLimitResult,
    client_ip,
    login_rate_limit,
    register_rate_limit,
)


def _request(headers: List[tuple], client=("10.0.0.9", 1234)) -> Request:
    return Request({"type": "http", "headers": headers, "client": client})


class TestRateLimiterCounting:
    def test_allows_up_to_limit(self):
        limiter = RateLimiter("login", limit=3, interval=60)

        results = [limiter.hit("1.2.3.4") for _ in range(4)]

        assert [r.allowed for r in results] == [True, True, True, False]
        assert [r.remaining for r in results] == [2, 1, 0, 0]

    def test_keys_are_independent(self):
        limiter = RateLimiter("login", limit=1, interval=60)

        assert limiter.hit("a").allowed is True
        assert limiter.hit("b").allowed is True
        assert limiter.hit("a").allowed is False

    def test_prefixes_are_independent_on_shared_storage(self):
        storage = MemoryStorage()
        login = RateLimiter("login", limit=1, interval=60, storage=storage)
        register = RateLimiter("register", limit=1, interval=60, storage=storage)

        assert login.hit("a").allowed is True
        assert register.hit("a").allowed is True
        assert login.hit("a").allowed is False

    def test_window_reset_time_is_within_interval(self):
        limiter = RateLimiter("login", limit=5, interval=60)
        before = time.time()

        result = limiter.hit("a")

        assert before < result.reset_at <= before + 61
        assert limiter.hit("a").reset_at == pytest.approx(result.reset_at, abs=1)

    def test_reset(self):
        limiter = RateLimiter("login", limit=1, interval=60)
        limiter.hit("a")

        limiter.reset()

        assert limiter.hit("a").allowed is True

    @pytest.mark.parametrize("limit, interval", [(0, 60), (1, 0), (1, -5)])
    def test_invalid_configuration(self, limit, interval):
        with pytest.raises(ValueError):
            RateLimiter("login", limit=limit, interval=interval)


class TestRateLimitResult:
    def test_headers_and_retry_after(self):
        result = RateLimitResult(allowed=True, limit=2, remaining=1, reset_at=1060.2)

        assert result.headers == {
            "X-RateLimit-Limit": "2",
            "X-RateLimit-Remaining": "1",
            "X-RateLimit-Reset": "1061",
        }
        assert result.retry_after(1000.5) == 60
        assert result.retry_after(2000.0) == 1


class TestClientIp:
    def test_first_forwarded_for_hop(self):
        request = _request([(b"x-forwarded-for", b"1.2.3.4, 5.6.7.8"), (b"x-real-ip", b"9.9.9.9")])
        assert client_ip(request) == "1.2.3.4"

    def test_real_ip(self):
        assert client_ip(_request([(b"x-real-ip", b" 9.9.9.9 ")])) == "9.9.9.9"

    def test_socket_peer(self):
        assert client_ip(_request([])) == "10.0.0.9"

    def test_unknown(self):
        assert client_ip(_request([], client=None)) == "unknown"


class TestRateLimiterDependency:
    @pytest.fixture
    def app(self):
        limiter = RateLimiter("ping", limit=2, interval=60)
        app = FastAPI()
        setup_exception_handlers(app)

        @app.get("/ping", dependencies=[Depends(limiter)])
        async def ping():
            return {"ok": True}

        return app

    async def test_headers_then_429(self, app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            first = await client.get("/ping")
            await client.get("/ping")
            blocked = await client.get("/ping")

        assert first.status_code == 200
        assert first.headers["X-RateLimit-Limit"] == "2"
        assert first.headers["X-RateLimit-Remaining"] == "1"

        assert blocked.status_code == 429
        assert blocked.json()["detail"] == "Too many requests. Please try again later."
        assert 1 <= int(blocked.headers["Retry-After"]) <= 60
        assert blocked.headers["X-RateLimit-Remaining"] == "0"

    async def test_limits_are_per_client(self, app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            for _ in range(2):
                await client.get("/ping", headers={"X-Forwarded-For": "1.1.1.1"})
            other = await client.get("/ping", headers={"X-Forwarded-For": "2.2.2.2"})

        assert other.status_code == 200


def test_endpoint_limits():
    assert login_rate_limit.limit == 5
    assert login_rate_limit.interval == 60
    assert register_rate_limit.limit == 3
    assert register_rate_limit.interval == 3600
