"""Per-client rate limiting for the record viewer endpoints."""

from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from src.models.errors import ErrorResponse

# Keyed by client address; limits are declared per route with @limiter.limit
limiter = Limiter(key_func=get_remote_address)


async def rate_limit_exceeded_handler(request, exc):
    """429 in the same body shape as the global exception handlers."""
    return JSONResponse(
        status_code=429,
        content=ErrorResponse(
            detail="Rate limit exceeded. Please try again later.",
            error_code="rate_limited",
        ).model_dump(),
    )


def setup_rate_limiting(app):
    """Attach the shared limiter to ``app`` and register the 429 handler."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    return limiter
