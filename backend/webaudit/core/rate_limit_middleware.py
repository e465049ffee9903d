"""
Rate Limiting Middleware

First stage of every API request: counts the request against the
client's window before method, body or URL are looked at.
"""

import logging
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from webaudit.config import settings
from webaudit.core.cors import cors_headers
from webaudit.core.exceptions import RateLimitedError
from webaudit.services.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

# Docs are served under the API prefix but never count against a client
EXEMPT_PATHS = {
    "/health",
    f"{settings.API_PREFIX}/docs",
    f"{settings.API_PREFIX}/openapi.json",
}


def get_client_identity(request: Request) -> str:
    """Client IP from the edge proxy header, else the socket peer."""
    forwarded = request.headers.get(settings.CLIENT_IP_HEADER)
    if forwarded:
        return forwarded.strip()
    if request.client and request.client.host:
        return request.client.host
    return "local"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Middleware for rate limiting API requests.

    The limiter is looked up on app.state, where the lifespan handler
    puts it, so tests can swap in their own instance.
    Adds rate limit headers to all responses.
    """

    def __init__(self, app, rate_limiter: RateLimiter = None):
        super().__init__(app)
        self.rate_limiter = rate_limiter

    def _get_limiter(self, request: Request) -> RateLimiter | None:
        if self.rate_limiter is not None:
            return self.rate_limiter
        return getattr(request.app.state, "rate_limiter", None)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not settings.RATE_LIMIT_ENABLED:
            return await call_next(request)

        path = request.url.path
        if path in EXEMPT_PATHS or not path.startswith(settings.API_PREFIX):
            return await call_next(request)

        rate_limiter = self._get_limiter(request)
        if rate_limiter is None:
            return await call_next(request)

        identity = get_client_identity(request)
        result = await rate_limiter.check(identity)

        if not result.allowed:
            logger.warning(f"Rate limit exceeded for {identity} on {path}")
            # Outside both the exception handlers and CORSMiddleware
            exc = RateLimitedError(result.retry_after or 60)
            return JSONResponse(
                status_code=exc.status_code,
                content={"error": exc.detail},
                headers={
                    "X-RateLimit-Limit": str(result.limit),
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Reset": str(result.reset_at),
                    **exc.headers,
                    **cors_headers(request.headers.get("origin")),
                },
            )

        response = await call_next(request)

        response.headers["X-RateLimit-Limit"] = str(result.limit)
        response.headers["X-RateLimit-Remaining"] = str(result.remaining)
        response.headers["X-RateLimit-Reset"] = str(result.reset_at)

        return response
