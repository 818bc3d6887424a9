"""
Fixed-window rate limiting backed by Redis.
"""
import logging

from redis.asyncio import Redis
from redis.exceptions import RedisError

logger = logging.getLogger("nurture.rate_limit")


class RateLimiter:
    """
    Counts requests per endpoint and client in Redis.

    Key pattern: ``ratelimit:{endpoint}:{ip}``, INCR with EXPIRE on first hit.
    """

    def __init__(self, redis: Redis, window_seconds: int = 60):
        self.redis = redis
        self.window_seconds = window_seconds

    async def check(self, ip: str, endpoint: str, limit: int) -> bool:
        """
        Record a hit and report whether it is within the limit.

        Returns:
            True if request is allowed, False if rate limited
        """
        key = f"ratelimit:{endpoint}:{ip}"
        try:
            current = await self.redis.incr(key)
            if current == 1:
                await self.redis.expire(key, self.window_seconds)
        except RedisError as e:
            # Redis outage must not lock users out
            logger.warning(f"Rate limit check skipped for {endpoint}: {e}")
            return True
        return current <= limit
