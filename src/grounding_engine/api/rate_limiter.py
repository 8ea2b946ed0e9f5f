"""In-memory sliding window rate limiter."""

from __future__ import annotations

import time
from collections import defaultdict

from fastapi import Depends, HTTPException, Request, status

from grounding_engine.api.auth import verify_token
from grounding_engine.observability.logger import get_logger

logger = get_logger("rate_limiter")


class SlidingWindowRateLimiter:
    """Tracks request timestamps per key within a sliding window."""

    def __init__(self) -> None:
        self._requests: dict[str, list[float]] = defaultdict(list)

    def check(self, key: str, max_requests: int, window_seconds: int = 60) -> bool:
        """Return True if request is allowed, False if rate-limited."""
        now = time.monotonic()
        cutoff = now - window_seconds

        self._requests[key] = [t for t in self._requests[key] if t > cutoff]

        if len(self._requests[key]) >= max_requests:
            return False

        self._requests[key].append(now)
        return True


def _enforce(request: Request, key: str, max_requests: int) -> None:
    limiter: SlidingWindowRateLimiter = request.app.state.rate_limiter
    if not limiter.check(key, max_requests):
        logger.warning("rate_limited", key=key)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Rate limit exceeded. Try again later.",
            headers={"Retry-After": "60"},
        )


async def rate_limit(
    request: Request,
    token_payload: dict = Depends(verify_token),
) -> dict:
    """FastAPI dependency: authenticate, then enforce the per-author request limit."""
    settings = request.app.state.settings
    _enforce(request, token_payload["sub"], settings.rate_limit_requests_per_minute)
    return token_payload


async def index_rate_limit(
    request: Request,
    token_payload: dict = Depends(rate_limit),
) -> dict:
    """Stricter limit for re-index jobs, which fan out to the embedding model."""
    settings = request.app.state.settings
    _enforce(request, f"index:{token_payload['sub']}", settings.index_rate_limit_per_minute)
    return token_payload
