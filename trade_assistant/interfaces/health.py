"""
Health check router.

Liveness probe. Also reports whether the custody signing path is enabled,
so a deployment missing its key is visible without calling a trade route.
"""

from fastapi import APIRouter

from trade_assistant.core.config import settings
from trade_assistant.interfaces.trading.schemas import HealthResponse
from trade_assistant.shared.security.rate_limiting import limiter

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns application status, version and custody signing availability.",
)
@limiter.exempt
def health_check() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=settings.version,
        custody_signing=bool(settings.backend_wallet_private_key),
    )
