"""
Error response schemas for API documentation and consistent error formatting.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Any, Dict


class ErrorDetail(BaseModel):
    """Schema for individual error detail."""

    field: Optional[str] = Field(
        None,
        description="Field name that caused the error",
        examples=["email"]
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Please enter a valid email"]
    )

    type: Optional[str] = Field(
        None,
        description="Error type identifier",
        examples=["value_error"]
    )


class ErrorResponse(BaseModel):
    """Schema for standardized error responses."""

    code: str = Field(..., description="Error code identifier", examples=["VALIDATION_ERROR"])
    message: str = Field(..., description="Human-readable error message")
    timestamp: str = Field(..., description="Error timestamp in ISO format")
    request_id: Optional[str] = Field(None, description="Unique request identifier for tracking")
    details: Optional[List[ErrorDetail]] = Field(None, description="Per-field error information")


class APIErrorResponse(BaseModel):
    """Schema for API error response wrapper."""

    error: ErrorResponse


def _example(code: str, message: str, details: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    error = {
        "code": code,
        "message": message,
        "timestamp": "2024-01-01T00:00:00Z",
        "request_id": "abc12345",
    }
    if details:
        error["details"] = details
    return {"application/json": {"example": {"error": error}}}


COMMON_ERROR_RESPONSES = {
    400: {
        "description": "Bad Request",
        "model": APIErrorResponse,
        "content": _example("BAD_REQUEST", "Invalid request parameters"),
    },
    401: {
        "description": "Unauthorized - backend rejected the session token",
        "content": {"application/json": {"example": {"message": "Not authorized, token failed"}}},
    },
    404: {
        "description": "Not Found",
        "content": {"application/json": {"example": {"message": "House not found"}}},
    },
    422: {
        "description": "Validation Error",
        "model": APIErrorResponse,
        "content": _example(
            "VALIDATION_ERROR",
            "Form validation failed",
            [{"field": "email", "message": "Please enter a valid email"}],
        ),
    },
    428: {
        "description": "Confirmation Required",
        "model": APIErrorResponse,
        "content": _example("CONFIRMATION_REQUIRED", "Confirmation required to delete user"),
    },
    502: {
        "description": "Backend Unreachable",
        "model": APIErrorResponse,
        "content": _example("BACKEND_ERROR", "Failed to retrieve houses"),
    },
}


def get_error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """
    Get error response schemas for specific status codes.

    Args:
        status_codes: HTTP status codes to include

    Returns:
        Dictionary of error response schemas
    """
    return {
        code: COMMON_ERROR_RESPONSES[code]
        for code in status_codes
        if code in COMMON_ERROR_RESPONSES
    }


def get_read_error_responses() -> Dict[int, Dict[str, Any]]:
    """Error responses for list and detail endpoints."""
    return get_error_responses(401, 404, 502)


def get_crud_error_responses() -> Dict[int, Dict[str, Any]]:
    """Error responses for create, update and delete endpoints."""
    return get_error_responses(400, 401, 404, 422, 502)


def get_delete_error_responses() -> Dict[int, Dict[str, Any]]:
    """Error responses for confirmed deletes."""
    return get_error_responses(401, 404, 428, 502)
