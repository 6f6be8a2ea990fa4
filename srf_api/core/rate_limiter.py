from __future__ import annotations

import threading
import time
from typing import Dict, Tuple

from fastapi import HTTPException, Request

SWEEP_INTERVAL_SECONDS = 60


class _RateLimiter:
    def __init__(self) -> None:
        self._hits: Dict[str, Tuple[int, float]] = {}
        self._lock = threading.Lock()
        self._next_sweep = 0.0

    def check(self, key: str, limit: int, window_seconds: int) -> None:
        if limit <= 0:
            return
        now = time.time()
        with self._lock:
            if now >= self._next_sweep:
                self._sweep(now)
            count, reset = self._hits.get(key, (0, now + window_seconds))
            if now > reset:
                count = 0
                reset = now + window_seconds
            count += 1
            self._hits[key] = (count, reset)
            if count > limit:
                raise HTTPException(429, "Too many requests. Please try again shortly.")

    def _sweep(self, now: float) -> None:
        for key in [k for k, (_, reset) in self._hits.items() if now > reset]:
            del self._hits[key]
        self._next_sweep = now + SWEEP_INTERVAL_SECONDS

    def tracked(self) -> int:
        with self._lock:
            return len(self._hits)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()
            self._next_sweep = 0.0


_limiter = _RateLimiter()


def _client_ip(request: Request, trust_forwarded: bool) -> str:
    # X-Forwarded-For is client-controlled unless a proxy we trust overwrites it.
    if trust_forwarded:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def rate_limit_ip(
    request: Request,
    scope: str,
    *,
    limit: int,
    window_seconds: int,
    trust_forwarded: bool = False,
) -> None:
    key = f"{scope}:{_client_ip(request, trust_forwarded)}"
    _limiter.check(key, limit, window_seconds)


def reset_limits() -> None:
    _limiter.reset()
