"""
Response Models
---------------
Pydantic response schemas shared by the API routers.
"""

from datetime import datetime, timezone
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str = Field(..., description="Human readable outcome")


class ErrorResponse(BaseModel):
    """
    Error body returned for every failed request.

    ``details`` carries field-level validation problems when there are any.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Validation failed",
                "details": [{"field": "code", "message": "String should have at least 2 characters"}],
            }
        }
    )

    error: str = Field(..., description="Error message")
    details: Optional[Any] = Field(default=None, description="Validation details")


class HealthStatus(BaseModel):
    """
    Health check response schema.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "timestamp": "2025-10-13T10:30:00Z",
                "version": "1.0.0",
            }
        }
    )

    status: str = Field(..., description="Service health status")
    version: Optional[str] = Field(default=None, description="Application version")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Health check timestamp",
    )


class DependencyHealth(BaseModel):
    """
    Dependency health response model.

    Each infrastructure component is reported as a boolean indicating whether
    it answered a trivial request.
    """

    postgresql: bool = Field(..., description="PostgreSQL database health status")
    redis: bool = Field(..., description="Redis cache health status")
    status: str = Field(
        ..., description="Overall health status: 'healthy' or 'unhealthy'"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Health check timestamp",
    )

    class Config:
        json_schema_extra = {
            "example": {
                "postgresql": True,
                "redis": True,
                "status": "healthy",
                "timestamp": "2025-10-13T10:30:00Z",
            }
        }
