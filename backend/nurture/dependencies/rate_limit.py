"""
Rate limit dependency factory.
"""
from typing import Callable

from fastapi import Depends, Request

from nurture.config import Settings
from nurture.core.errors import RateLimited
from nurture.core.rate_limit import RateLimiter
from nurture.dependencies.services import get_app_settings, get_rate_limiter


def get_client_ip(request: Request) -> str:
    """Extract client IP from request."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def rate_limit(endpoint: str, limit_setting: str) -> Callable:
    """
    Dependency factory limiting requests per client IP.

    Usage:
        @router.post("/signin", dependencies=[Depends(rate_limit("/auth/signin", "signin_rate_limit_attempts"))])

    Args:
        endpoint: Key used for the counter
        limit_setting: Name of the Settings field holding the limit
    """
    async def limiter(
        request: Request,
        settings: Settings = Depends(get_app_settings),
        rate_limiter: RateLimiter = Depends(get_rate_limiter),
    ) -> None:
        limit = getattr(settings, limit_setting)
        if not await rate_limiter.check(get_client_ip(request), endpoint, limit):
            raise RateLimited()

    return limiter
