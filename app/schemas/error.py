"""Standardized error response schema."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error body for every failed request."""

    detail: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Machine-readable error code")
    status: int = Field(..., description="HTTP status code, repeated in the body")
