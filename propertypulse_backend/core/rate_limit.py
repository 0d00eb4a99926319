"""
Per-IP request throttling.

Moving-window limits from the ``limits`` library. Authentication routes
get their own, stricter window. Rejected requests receive the standard
failure envelope with a ``Retry-After`` header.
"""

import logging
import math
import time
from collections.abc import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from limits import RateLimitItem, parse
from limits.aio.strategies import MovingWindowRateLimiter
from limits.storage import storage_from_string
from starlette.middleware.base import BaseHTTPMiddleware

from ..config import Settings
from .exceptions import ConfigurationError, RateLimited

logger = logging.getLogger(__name__)


def client_ip(request: Request) -> str:
    """Caller address, honouring the first ``X-Forwarded-For`` hop."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests beyond the configured window for the caller's IP."""

    def __init__(self, app, settings: Settings):
        super().__init__(app)
        try:
            self.default_limit: RateLimitItem = parse(settings.rate_limit_default)
            self.auth_limit: RateLimitItem = parse(settings.rate_limit_auth)
        except ValueError as e:
            raise ConfigurationError(f"Invalid rate limit: {e}") from e
        self.api_prefix = settings.api_prefix
        self.auth_prefix = f"{settings.api_prefix}/auth"
        self.limiter = MovingWindowRateLimiter(
            storage_from_string(settings.rate_limit_storage_uri)
        )

    def _limit_for(self, path: str) -> tuple[str, RateLimitItem] | None:
        if path.startswith(self.auth_prefix):
            return "auth", self.auth_limit
        if path.startswith(self.api_prefix):
            return "api", self.default_limit
        return None

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        selected = self._limit_for(request.url.path)
        if selected is None or request.method == "OPTIONS":
            return await call_next(request)

        scope, limit = selected
        ip = client_ip(request)
        if await self.limiter.hit(limit, scope, ip):
            return await call_next(request)

        stats = await self.limiter.get_window_stats(limit, scope, ip)
        retry_after = max(1, math.ceil(stats.reset_time - time.time()))
        logger.warning(
            "Rate limit exceeded",
            extra={"client_ip": ip, "scope": scope, "retry_after": retry_after},
        )
        exc = RateLimited(
            "Too many requests, please try again later", retry_after=retry_after
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "message": exc.message,
                "error": exc.message,
                "data": {"retry_after": retry_after},
            },
            headers={"Retry-After": str(retry_after)},
        )
