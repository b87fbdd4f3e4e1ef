"""Health check API routes."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from dailycode.shared.database import get_health_status
from dailycode.shared.feature_flags import get_feature_flags

router = APIRouter()


class StoreHealth(BaseModel):
    healthy: bool
    type: str = Field(..., description="memory or postgresql")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(
        ...,
        description="healthy or unhealthy",
    )
    version: str = Field(
        default="1.0.0",
        description="API version",
    )
    store: StoreHealth
    features: dict[str, bool] = Field(
        default_factory=dict,
        description="Effective feature flag states",
    )


class LivenessResponse(BaseModel):
    """Liveness check response."""

    status: str = Field(
        default="alive",
        description="Liveness status",
    )


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check",
    description="Report whether the configured store is reachable.",
    responses={503: {"model": HealthResponse}},
)
async def health_check() -> HealthResponse | JSONResponse:
    """Health of the store in use; 503 when it cannot be reached."""
    health = await get_health_status()
    body = HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        store=StoreHealth(**health["store"]),
        features=get_feature_flags().get_all_states(),
    )
    if not health["overall"]:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=body.model_dump(),
        )
    return body


@router.get(
    "/live",
    response_model=LivenessResponse,
    summary="Liveness check",
    description="Check if the service is alive.",
)
async def liveness_check() -> LivenessResponse:
    """Always alive if the endpoint is reachable."""
    return LivenessResponse(status="alive")
