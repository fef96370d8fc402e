"""Common schemas used across the application."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HealthStatus(str, Enum):
    """Health check status values."""

    OK = "OK"
    DEGRADED = "DEGRADED"


class CheckResult(BaseModel):
    """Result of an individual dependency check."""

    model_config = ConfigDict(from_attributes=True)

    healthy: bool = Field(description="Whether the dependency is healthy")
    latency_ms: float | None = Field(default=None, description="Response time in milliseconds")
    error: str | None = Field(default=None, description="Error message if unhealthy")


class HealthResponse(BaseModel):
    """Response schema for the liveness endpoint.

    The service reports DEGRADED rather than failing when the database is
    unreachable, so hosting probes keep the instance alive while it reconnects.
    """

    model_config = ConfigDict(from_attributes=True)

    status: HealthStatus = Field(description="Overall health status")
    service: str = Field(description="Service name")
    timestamp: datetime = Field(default_factory=_utcnow, description="Check timestamp")
    environment: str = Field(description="Deployment environment")
    stripe_mode: str = Field(description="TEST or LIVE, derived from the Stripe key")
    database: CheckResult = Field(description="Database connectivity check")


class WarmupResponse(BaseModel):
    """Response schema for the warm-up ping."""

    warmed: bool = Field(default=True, description="Always true once the process answers")
    time: datetime = Field(default_factory=_utcnow, description="Server time")


class ErrorResponse(BaseModel):
    """Standard error response schema.

    All API errors are returned in this format for consistency.
    """

    model_config = ConfigDict(from_attributes=True)

    success: bool = Field(default=False, description="Always false for errors")
    error: str = Field(description="Error type or category")
    message: str = Field(description="Human-readable error description")
    request_id: str | None = Field(default=None, description="Request ID for tracing")
    timestamp: datetime = Field(default_factory=_utcnow, description="Error timestamp")
