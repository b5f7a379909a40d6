"""
Health check router.

Liveness probe for load balancers. Touches neither the ledger nor
the rate provider, so it stays green while CoinGecko is down.
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from app.core.config import settings
from app.interfaces.trading.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Service name, version and server time.",
)
def health_check() -> HealthResponse:
    return HealthResponse(
        status="ok",
        service=settings.project_name,
        version=settings.version,
        timestamp=datetime.now(timezone.utc),
    )
