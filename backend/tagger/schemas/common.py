"""
Image Tagger Backend — Shared Response Schemas
================================================

What:  Envelope models that are not records: login result, errors, health.
"""

from typing import Optional

from pydantic import BaseModel, Field

from tagger.schemas.user import User


class LoginResponse(BaseModel):
    """Returned by POST /login."""
    message: str = Field(default="Login successful", description="Human-readable result")
    user: User = Field(description="The authenticated user")


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "error": "You can only delete your own threads",
            "code": "forbidden",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Human-readable error description")
    code: str = Field(description="Machine-readable error code")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    storage_backend: str = Field(description="Configured storage backend: memory, sql")
    storage: str = Field(description="Storage reachability: connected, disconnected")
    in_memory: bool = Field(description="True when state is discarded on restart")
    uptime_seconds: float = Field(description="Seconds since service started")
