"""
Rate Limiting Module

Sliding-window rate limiting for write endpoints (review submission,
status changes, rubric updates). Uses Redis when it is connected and falls
back to in-memory storage otherwise.
"""

import logging
import time

from fastapi import HTTPException, status
from redis.asyncio import Redis

from unidoxia.core.auth import CurrentUser
from unidoxia.core.redis import get_redis

logger = logging.getLogger(__name__)

# In-memory rate limit storage (fallback when Redis unavailable)
# Format: {key: (window_seconds, [timestamp, ...])}
_memory_store: dict[str, tuple[int, list[float]]] = {}

# Expired keys are swept at most this often
MEMORY_SWEEP_INTERVAL_SECONDS = 60
_last_sweep = 0.0


class RateLimitExceeded(HTTPException):
    """Exception raised when rate limit is exceeded."""

    def __init__(self, limit: int, window_seconds: int):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": "RATE_LIMIT_EXCEEDED",
                "message": f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds.",
                "retry_after_seconds": window_seconds,
            },
            headers={"Retry-After": str(window_seconds)},
        )


async def _check_rate_limit_redis(
    client: Redis,
    key: str,
    limit: int,
    window_seconds: int,
) -> bool:
    """
    Check rate limit using a Redis sorted set as the sliding window.

    Returns:
        True if request is allowed, False if rate limit exceeded
    """
    now = time.time()
    window_start = now - window_seconds

    pipe = client.pipeline()
    pipe.zremrangebyscore(key, 0, window_start)
    pipe.zcard(key)
    pipe.zadd(key, {str(now): now})
    pipe.expire(key, window_seconds)

    results = await pipe.execute()
    current_count = results[1]

    return current_count < limit


def _evict_expired_keys(now: float) -> None:
    """Drop keys with no hits left inside their window."""
    global _last_sweep

    if now - _last_sweep < MEMORY_SWEEP_INTERVAL_SECONDS:
        return
    _last_sweep = now

    expired = [
        key
        for key, (window_seconds, hits) in _memory_store.items()
        if not hits or hits[-1] <= now - window_seconds
    ]
    for key in expired:
        del _memory_store[key]


def _check_rate_limit_memory(key: str, limit: int, window_seconds: int) -> bool:
    """
    Check rate limit using process memory.

    Not shared across server instances.
    """
    now = time.time()
    window_start = now - window_seconds
    _evict_expired_keys(now)

    _, stored_hits = _memory_store.get(key, (window_seconds, []))
    hits = [ts for ts in stored_hits if ts > window_start]

    if len(hits) >= limit:
        _memory_store[key] = (window_seconds, hits)
        return False

    hits.append(now)
    _memory_store[key] = (window_seconds, hits)
    return True


async def check_rate_limit(key: str, limit: int, window_seconds: int) -> bool:
    """
    Check if a request is within rate limits.

    Tries Redis first, falls back to in-memory storage.

    Args:
        key: Unique key for this rate limit (e.g., "review:submit:<user_id>")
        limit: Maximum requests allowed in the window
        window_seconds: Time window in seconds

    Returns:
        True if request is allowed, False if rate limit exceeded
    """
    client = get_redis()

    if client is not None:
        try:
            return await _check_rate_limit_redis(client, key, limit, window_seconds)
        except Exception as e:
            logger.warning(f"Redis rate limit check failed, using memory: {e}")

    return _check_rate_limit_memory(key, limit, window_seconds)


async def enforce_user_rate_limit(
    user: CurrentUser,
    action: str,
    limit: int,
    window_seconds: int,
) -> None:
    """
    Apply a per-user rate limit for an action.

    Raises:
        RateLimitExceeded: If the user exceeded the limit
    """
    key = f"{action}:{user.id}"
    allowed = await check_rate_limit(key, limit, window_seconds)

    if not allowed:
        logger.warning(
            f"Rate limit exceeded for user {user.id} on action '{action}': "
            f"{limit}/{window_seconds}s"
        )
        raise RateLimitExceeded(limit, window_seconds)


__all__ = [
    "check_rate_limit",
    "enforce_user_rate_limit",
    "RateLimitExceeded",
]
