"""In-memory rate limiting dependency."""

from __future__ import annotations

import time
from collections import deque
from threading import Lock
from typing import Callable, Deque

from fastapi import Request, Response

from onlineshops.core.config import settings
from onlineshops.core.exceptions import RateLimitExceeded


class SlidingWindowLimiter:
    """Per-key sliding window; keys idle for a full window are dropped."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._store: dict[str, Deque[float]] = {}
        self._lock = Lock()
        self._clock = clock
        self._last_sweep = 0.0

    def __len__(self) -> int:
        return len(self._store)

    def hit(self, key: str, *, limit: int, window_seconds: int) -> tuple[bool, int, int]:
        if limit <= 0:
            return True, limit, 0
        now = self._clock()
        cutoff = now - window_seconds
        with self._lock:
            if now - self._last_sweep >= window_seconds:
                self._sweep(cutoff)
                self._last_sweep = now
            queue = self._store.get(key)
            if queue is None:
                queue = deque()
                self._store[key] = queue
            while queue and queue[0] <= cutoff:
                queue.popleft()
            if len(queue) >= limit:
                retry_after = max(int(queue[0] + window_seconds - now), 1)
                return False, 0, retry_after
            queue.append(now)
            return True, max(limit - len(queue), 0), 0

    def _sweep(self, cutoff: float) -> None:
        for key in list(self._store):
            queue = self._store[key]
            while queue and queue[0] <= cutoff:
                queue.popleft()
            if not queue:
                del self._store[key]

    def reset(self) -> None:
        with self._lock:
            self._store.clear()
            self._last_sweep = 0.0


_limiter = SlidingWindowLimiter()


def client_ip(request: Request) -> str | None:
    """Caller address; ``X-Forwarded-For`` counts only when sent by a trusted proxy."""
    peer = request.client.host if request.client else None
    trusted = settings.trusted_proxies
    if peer is None or peer not in trusted:
        return peer
    hops = [hop.strip() for hop in request.headers.get("x-forwarded-for", "").split(",") if hop.strip()]
    # Rightmost hop that is not one of our proxies is the real client.
    for hop in reversed(hops):
        if hop not in trusted:
            return hop
    return peer


def _scope_limit(scope: str) -> int:
    if scope == "auth":
        return settings.RATE_LIMIT_AUTH_MAX_REQUESTS
    return settings.RATE_LIMIT_MAX_REQUESTS


def rate_limit(scope: str = "default"):
    def _dependency(request: Request, response: Response) -> None:
        if not settings.RATE_LIMIT_ENABLED:
            return
        limit = _scope_limit(scope)
        key = f"{scope}:{client_ip(request) or 'unknown'}"
        ok, remaining, retry_after = _limiter.hit(
            key,
            limit=limit,
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        )
        response.headers["X-RateLimit-Limit"] = str(limit)
        response.headers["X-RateLimit-Remaining"] = str(max(remaining, 0))
        response.headers["X-RateLimit-Window"] = str(settings.RATE_LIMIT_WINDOW_SECONDS)
        if not ok:
            raise RateLimitExceeded(
                retry_after=retry_after,
                limit=limit,
                window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
            )

    return _dependency
