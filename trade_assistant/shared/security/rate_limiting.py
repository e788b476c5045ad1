"""
Per-client rate limiting backed by slowapi.

Every route gets ``DEFAULT_RATE_LIMIT`` per remote address through
``SlowAPIMiddleware``. Routes that sign with the custody key opt into
``HEAVY_RATE_LIMIT`` with ``@limiter.limit``. The health probe is exempt
so load balancers never trip it.
"""

from fastapi import FastAPI
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from trade_assistant.core.config import settings

DEFAULT_RATE_LIMIT = settings.rate_limit_default
HEAVY_RATE_LIMIT = settings.rate_limit_heavy

limiter = Limiter(key_func=get_remote_address, default_limits=[DEFAULT_RATE_LIMIT])


async def rate_limit_exceeded_handler(
    _request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Turn a tripped limit into a 429 with a ``Retry-After`` hint."""
    return JSONResponse(
        status_code=429,
        content={"error": "Rate limit exceeded", "detail": str(exc.detail)},
        headers={"Retry-After": str(exc.limit.limit.get_expiry())},
    )


def install_rate_limiting(app: FastAPI, app_limiter: Limiter = limiter) -> None:
    """Attach the limiter, its 429 handler and the default-limit middleware.

    Args:
        app: Application to protect.
        app_limiter: Limiter whose ``default_limits`` apply to every route.
    """
    app.state.limiter = app_limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)
