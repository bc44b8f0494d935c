from __future__ import annotations

import pytest
from starlette.requests import Request

from onlineshops.core import rate_limit as rate_limit_module
from onlineshops.core.config import settings
from onlineshops.core.rate_limit import SlidingWindowLimiter, client_ip

BAD_LOGIN = {"email": "nobody@example.com", "password": "not-the-password"}


@pytest.fixture
def auth_limit(monkeypatch):
    monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", True)
    monkeypatch.setattr(settings, "RATE_LIMIT_AUTH_MAX_REQUESTS", 3)
    rate_limit_module._limiter.reset()
    yield
    rate_limit_module._limiter.reset()


def _request(peer: str, forwarded: str | None = None) -> Request:
    headers = [(b"x-forwarded-for", forwarded.encode())] if forwarded else []
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers, "client": (peer, 50000)})


def test_login_limit_returns_429_with_retry_after(client, auth_limit) -> None:
    statuses = [client.post("/auth/login", json=BAD_LOGIN).status_code for _ in range(5)]
    assert statuses == [401, 401, 401, 429, 429]

    blocked = client.post("/auth/login", json=BAD_LOGIN)
    assert blocked.status_code == 429
    assert int(blocked.headers["Retry-After"]) >= 1
    assert blocked.json()["error_code"] == "RATE_LIMIT"


def test_forwarded_header_from_untrusted_peer_does_not_bypass_limit(client, auth_limit) -> None:
    statuses = [
        client.post("/auth/login", json=BAD_LOGIN, headers={"X-Forwarded-For": f"198.51.100.{i}"}).status_code
        for i in range(10)
    ]
    assert statuses.count(429) == 7
    assert len(rate_limit_module._limiter) == 1


def test_forwarded_header_from_trusted_proxy_keys_per_client(client, auth_limit, monkeypatch) -> None:
    monkeypatch.setattr(settings, "TRUSTED_PROXIES", "testclient")
    statuses = [
        client.post("/auth/login", json=BAD_LOGIN, headers={"X-Forwarded-For": f"198.51.100.{i}"}).status_code
        for i in range(5)
    ]
    assert statuses == [401] * 5


def test_client_ip_ignores_forwarded_header_without_trusted_proxy(monkeypatch) -> None:
    monkeypatch.setattr(settings, "TRUSTED_PROXIES", "")
    assert client_ip(_request("10.0.0.5", "203.0.113.9")) == "10.0.0.5"


def test_client_ip_walks_past_trusted_hops(monkeypatch) -> None:
    monkeypatch.setattr(settings, "TRUSTED_PROXIES", "10.0.0.1, 10.0.0.2")
    request = _request("10.0.0.1", "1.2.3.4, 203.0.113.9, 10.0.0.2")
    assert client_ip(request) == "203.0.113.9"
    assert client_ip(_request("10.0.0.1", "10.0.0.2")) == "10.0.0.1"
    assert client_ip(_request("10.0.0.1")) == "10.0.0.1"


def test_idle_keys_are_swept_after_a_window() -> None:
    now = [1000.0]
    limiter = SlidingWindowLimiter(clock=lambda: now[0])
    for i in range(50):
        assert limiter.hit(f"auth:10.0.0.{i}", limit=3, window_seconds=60)[0]
    assert len(limiter) == 50

    now[0] += 61
    limiter.hit("auth:10.0.1.1", limit=3, window_seconds=60)
    assert len(limiter) == 1


def test_window_slides() -> None:
    now = [1000.0]
    limiter = SlidingWindowLimiter(clock=lambda: now[0])
    for _ in range(2):
        assert limiter.hit("k", limit=2, window_seconds=60)[0]

    ok, remaining, retry_after = limiter.hit("k", limit=2, window_seconds=60)
    assert (ok, remaining) == (False, 0)
    assert retry_after == 60

    now[0] += 60
    assert limiter.hit("k", limit=2, window_seconds=60) == (True, 1, 0)
