from fastapi import FastAPI, Request, status
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from companion.core.config import settings
from companion.core.responses import send_error
from companion.utils.logging import get_logger

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
    enabled=settings.RATE_LIMIT_ENABLED,
)


async def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    get_logger().warning(
        f"Rate limit hit by {get_remote_address(request)} on {request.url.path}"
    )
    return send_error(
        "Rate limit exceeded",
        details=str(exc.detail),
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
    )


def setup_rate_limiting(app: FastAPI):
    app.state.limiter = limiter
    if not settings.RATE_LIMIT_ENABLED:
        return
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)
