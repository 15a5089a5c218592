from __future__ import annotations

import logging
import threading
import time
from typing import Dict, Tuple

from fastapi import HTTPException, Request

from .config import get_settings

logger = logging.getLogger(__name__)


class _RateLimiter:
    def __init__(self) -> None:
        self._hits: Dict[str, Tuple[int, float]] = {}
        self._lock = threading.Lock()

    def check(self, key: str, limit: int, window_seconds: int) -> None:
        now = time.time()
        with self._lock:
            count, reset = self._hits.get(key, (0, now + window_seconds))
            if now > reset:
                count = 0
                reset = now + window_seconds
            count += 1
            self._hits[key] = (count, reset)
            if count > limit:
                logger.warning("Rate limit exceeded for %s", key)
                raise HTTPException(429, "Too many requests. Try again shortly.")

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


_limiter = _RateLimiter()


def _client_ip(request: Request) -> str:
    # X-Forwarded-For is client controlled unless a trusted proxy sets it.
    if get_settings().trust_proxy_headers:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def rate_limit_ip(request: Request, scope: str, *, limit: int, window_seconds: int) -> None:
    if limit <= 0:
        return
    key = f"{scope}:{_client_ip(request)}"
    _limiter.check(key, limit, window_seconds)


def reset_limits() -> None:
    _limiter.reset()
