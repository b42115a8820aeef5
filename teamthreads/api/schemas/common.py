"""Common API schemas shared across endpoints."""

from typing import Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response.

    Args:
        error: Error code (e.g., "no_team_selected", "not_a_participant")
        message: Human-readable error description
        details: Optional additional error context (e.g., the required role)
        request_id: Optional request ID for tracing
    """

    error: str
    message: str
    details: Optional[dict] = None
    request_id: Optional[str] = None


class SuccessResponse(BaseModel):
    """Generic success response.

    Args:
        message: Human-readable success message
        data: Optional response payload
    """

    message: str
    data: Optional[dict] = None


class ServiceStatus(BaseModel):
    """Service health status information.

    Args:
        status: Service status ("connected", "error")
        latency_ms: Optional response latency in milliseconds
        error: Optional error message if service is unhealthy
    """

    status: str
    latency_ms: Optional[float] = None
    error: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response with service status.

    Args:
        status: Overall health status ("ok", "error")
        version: Application version
        services: Dictionary of service statuses (e.g., {"database": ServiceStatus})
    """

    status: str
    version: str = "0.1.0"
    services: dict[str, ServiceStatus] = Field(default_factory=dict)
