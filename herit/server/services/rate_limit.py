"""
Fixed-Window Rate Limiting.

Per-client request budgets built on the ``limits`` package: a
``FixedWindowRateLimiter`` strategy over in-process ``memory://`` storage,
keyed by ``(prefix, client_ip)``. Counters are not shared between processes.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Dict, Optional

from fastapi import Request, Response
from limits import RateLimitItemPerSecond
from limits.storage import Storage, storage_from_string
from limits.strategies import FixedWindowRateLimiter

from herit.core.errors import RateLimitExceededError
from herit.core.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    reset_at: float

    @property
    def reset_epoch(self) -> int:
        return int(math.ceil(self.reset_at))

    def retry_after(self, now: float) -> int:
        return max(1, int(math.ceil(self.reset_at - now)))

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset_epoch),
        }


def client_ip(request: Request) -> str:
    """Client address: first X-Forwarded-For hop, then X-Real-IP, then the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


class RateLimiter:
    """
    FastAPI dependency enforcing a fixed-window limit per client IP.

    Rejected requests raise ``RateLimitExceededError`` (rendered as 429 with
    ``Retry-After``); allowed requests get ``X-RateLimit-*`` headers.

    Args:
        prefix: Key namespace, usually the endpoint name.
        limit: Maximum number of requests per window.
        interval: Window length in seconds.
        storage: ``limits`` storage backend; a private ``memory://`` store by default.
    """

    def __init__(
        self,
        prefix: str,
        limit: int = 10,
        interval: int = 60,
        storage: Optional[Storage] = None,
    ) -> None:
        if limit < 1 or interval < 1:
            raise ValueError("limit and interval must be >= 1")
        self.prefix = prefix
        self.item = RateLimitItemPerSecond(limit, interval)
        self.storage = storage or storage_from_string("memory://")
        self.strategy = FixedWindowRateLimiter(self.storage)

    @property
    def limit(self) -> int:
        return self.item.amount

    @property
    def interval(self) -> int:
        return self.item.get_expiry()

    def hit(self, key: str) -> RateLimitResult:
        """Record one request for ``key`` and report whether it is allowed."""
        allowed = self.strategy.hit(self.item, self.prefix, key)
        stats = self.strategy.get_window_stats(self.item, self.prefix, key)
        return RateLimitResult(allowed, self.limit, max(0, stats.remaining), stats.reset_time)

    async def __call__(self, request: Request, response: Response) -> RateLimitResult:
        ip = client_ip(request)
        result = self.hit(ip)
        if not result.allowed:
            logger.warning(f"Rate limit exceeded for {self.prefix}:{ip}")
            raise RateLimitExceededError(
                limit=result.limit,
                reset_at=result.reset_epoch,
                retry_after=result.retry_after(time.time()),
            )
        response.headers.update(result.headers)
        return result

    def reset(self) -> None:
        self.storage.reset()


login_rate_limit = RateLimiter("login", limit=5, interval=60)
register_rate_limit = RateLimiter("register", limit=3, interval=60 * 60)
