"""
Common schemas used across the API.
"""
from typing import List, Optional

from pydantic import BaseModel, Field


class HealthCheckResponse(BaseModel):
    """Response schema for health check endpoint."""
    status: str = Field(..., description="Application health status")
    database: str = Field(..., description="Database connection status")
    timestamp: str = Field(..., description="Health check timestamp")
    version: str = Field(..., description="Application version")


class RootResponse(BaseModel):
    """Response schema for root endpoint."""
    message: str = Field(..., description="Welcome message")
    version: str = Field(..., description="API version")
    docs: str = Field(..., description="Documentation URL")
    health: str = Field(..., description="Health check URL")
    status: str = Field(..., description="Application status")
    timestamp: str = Field(..., description="Response timestamp")


class FieldErrorDetail(BaseModel):
    field: str = Field(..., description="Offending field or parameter")
    message: str = Field(..., description="What is wrong with it")


class ErrorResponse(BaseModel):
    """Error envelope returned by every failing request."""
    success: bool = Field(False, description="Always false")
    message: str = Field(..., description="Human-readable error message")
    errors: Optional[List[FieldErrorDetail]] = Field(None, description="Per-field validation errors")
    detail: Optional[str] = Field(None, description="Driver error text, outside production only")


class SuccessResponse(BaseModel):
    """Acknowledgment without payload."""
    success: bool = Field(True, description="Operation success status")
