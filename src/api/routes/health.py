"""
Health Router - liveness and readiness endpoints

Readiness reports how many credentials are loaded and how many are cooling
down. It never exposes credential values.

Reference Documents:
- Building Microservices (Newman) pp. 273-275: Service metrics and synthetic monitoring
"""

import logging

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from src.api.deps import get_failover_controller
from src.services.failover import FailoverController

logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"


# =============================================================================
# Response Models
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class CredentialSummary(BaseModel):
    """Pool size and cooldown count, no identifiers."""

    total: int
    cooling_down: int


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    checks: dict[str, bool]
    credentials: CredentialSummary


# =============================================================================
# Router
# =============================================================================

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Liveness probe."""
    return HealthResponse(status="healthy", version=APP_VERSION)


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness(
    response: Response,
    controller: FailoverController = Depends(get_failover_controller),
) -> ReadinessResponse:
    """
    Readiness probe.

    Degraded (503) when every credential is cooling down; requests are still
    served in that state but are likely to fail.
    """
    pool = controller.pool
    total = len(pool)
    cooling = pool.cooling_down_count()

    checks = {
        "credentials_loaded": total > 0,
        "healthy_credential_available": cooling < total,
    }
    ready = all(checks.values())
    if not ready:
        logger.warning(f"Readiness degraded: {cooling}/{total} credentials cooling down")
        response.status_code = 503

    return ReadinessResponse(
        status="ready" if ready else "degraded",
        checks=checks,
        credentials=CredentialSummary(total=total, cooling_down=cooling),
    )
