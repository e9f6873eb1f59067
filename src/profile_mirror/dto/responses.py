"""Response DTOs for API endpoints."""

from pydantic import BaseModel, Field


class SessionProbeResponse(BaseModel):
    """Body returned for the upstream's signed-in user probe.

    Mirrors the upstream's own unauthenticated answer so the mirrored
    page always renders the signed-out view.
    """

    status: int = Field(401, description="HTTP status echoed in the body")
    code: str = Field("UNKNOWN_ERROR", description="Upstream error code")
    message: str = Field("Unauthorized", description="Human-readable message")


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    store_healthy: bool = Field(..., description="Whether the object store is reachable")
