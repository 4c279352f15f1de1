"""
BizTime Backend — Shared Response Schemas
===========================================

What:  Response bodies shared by every route group: errors, deletion
       confirmations and the health check, plus the Money field type.
"""

from decimal import Decimal
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, Field, PlainSerializer

# Invoice amounts are exact decimals internally and JSON numbers on the wire
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class StatusResponse(BaseModel):
    """Returned by DELETE /companies/{code} and DELETE /invoices/{id}."""
    status: Literal["deleted"] = Field(default="deleted", description="Outcome of the deletion")


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Fields:
        error: Machine-readable error code (e.g., "bad_request", "not_found")
        message: Human-readable description for display to users
        details: Optional extra context (e.g., which fields failed validation)
        request_id: Correlation ID for tracing this error in server logs

    Example:
        {
            "error": "not_found",
            "message": "No matching company: acme",
            "request_id": "1f0c2a9b"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """
    What:  Health check response showing service and database status.
    Who:   Returned by GET /health for monitoring and load balancer probes.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
