"""
Error response models.

Standardized error responses for the API.
"""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format, as produced by SparkTasksError.to_dict()."""

    error: str = Field(..., description="Machine-readable error code")
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


# Documented on routers through the responses= argument
ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    401: {"model": ErrorResponse, "description": "Not authenticated"},
    404: {"model": ErrorResponse, "description": "Not found"},
    422: {"model": ErrorResponse, "description": "Validation failed"},
    502: {"model": ErrorResponse, "description": "Backend unavailable"},
}
