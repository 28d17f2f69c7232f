"""Common data models.

This module contains base models and common response models
used throughout the application.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel as PydanticBaseModel, ConfigDict, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel(PydanticBaseModel):
    """Base model with common configuration."""

    model_config = ConfigDict(
        # Use enum values instead of enum objects
        use_enum_values=True,
        # Validate assignment to model fields
        validate_assignment=True,
        # Allow population by field name and alias
        populate_by_name=True,
    )


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="Application version")
    backend_configured: bool = Field(..., description="Whether a backend base origin is set")
    timestamp: datetime = Field(default_factory=utcnow, description="Response timestamp")


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str = Field(..., description="Error detail message")
    type: str = Field(..., description="Error type")
    correlation_id: Optional[str] = Field(None, description="Request correlation ID")
    details: Optional[Dict[str, Any]] = Field(None, description="Additional error details")


class ProxyErrorResponse(BaseModel):
    """Error body returned by the /api forwarder."""

    error: str = Field(..., description="Error message")
