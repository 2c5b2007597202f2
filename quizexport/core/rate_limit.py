"""
In-memory rate limiter middleware.

Sliding window per (client_ip, rule_prefix). Each scrape request triggers an
outbound fetch plus a render, so it gets a tighter budget than the rest of
the API. Single-process only.
"""

import time
import logging
from collections import defaultdict
from typing import Dict, List, Optional, Tuple

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from quizexport.core.config import settings

logger = logging.getLogger(__name__)


# ── Rate limit rules: (path_prefix, max_requests, window_seconds) ──
RATE_RULES: List[Tuple[str, int, int]] = [
    (f"{settings.API_V1_STR}/scrape", 10, 60),
]

DEFAULT_LIMIT = 60
DEFAULT_WINDOW = 60
CLEANUP_INTERVAL = 300


class SlidingWindowCounter:
    """Timestamps per key; `hit` answers whether one more request fits."""

    def __init__(self, clock=time.time):
        self._clock = clock
        self._hits: Dict[str, List[float]] = defaultdict(list)
        self._last_cleanup = clock()

    def hit(self, key: str, limit: int, window: int) -> Tuple[bool, int, float]:
        """Record a request. Returns (allowed, remaining, oldest_timestamp)."""
        now = self._clock()
        hits = self._hits[key]
        hits[:] = [t for t in hits if t > now - window]

        if len(hits) >= limit:
            return False, 0, hits[0]

        hits.append(now)
        self._maybe_cleanup(now)
        return True, limit - len(hits), hits[0]

    def _maybe_cleanup(self, now: float):
        if now - self._last_cleanup < CLEANUP_INTERVAL:
            return
        self._last_cleanup = now
        cutoff = now - CLEANUP_INTERVAL
        for key in list(self._hits):
            self._hits[key] = [t for t in self._hits[key] if t > cutoff]
            if not self._hits[key]:
                del self._hits[key]


def find_rule(path: str) -> Optional[Tuple[str, int, int]]:
    """Matching (prefix, limit, window) for `path`, or None when unlimited."""
    for prefix, limit, window in RATE_RULES:
        if path.startswith(prefix):
            return prefix, limit, window
    if path.startswith("/api/"):
        return "/api/", DEFAULT_LIMIT, DEFAULT_WINDOW
    return None


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, enabled: bool = True, counter: Optional[SlidingWindowCounter] = None):
        super().__init__(app)
        self.enabled = enabled
        self.counter = counter or SlidingWindowCounter()

    @staticmethod
    def _get_client_ip(request: Request) -> str:
        """Get real client IP (handles proxies)."""
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    async def dispatch(self, request: Request, call_next) -> Response:
        rule = find_rule(request.url.path) if self.enabled else None
        if rule is None:
            return await call_next(request)

        prefix, limit, window = rule
        client_ip = self._get_client_ip(request)
        allowed, remaining, oldest = self.counter.hit(f"{client_ip}:{prefix}", limit, window)

        if not allowed:
            retry_after = int(oldest + window - time.time()) + 1
            logger.warning(f"Rate limited: {client_ip} on {prefix} ({limit} in {window}s)")
            return JSONResponse(
                status_code=429,
                content={
                    "success": False,
                    "error": f"Too many requests. Try again in {retry_after}s.",
                },
                headers={
                    "Retry-After": str(retry_after),
                    "X-RateLimit-Limit": str(limit),
                    "X-RateLimit-Remaining": "0",
                },
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(limit)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        return response
