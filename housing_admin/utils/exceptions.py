"""
Custom exception classes for the Housing Admin Console.
Provides structured error handling with appropriate HTTP status codes.
"""

from typing import Any, Dict, Optional, List
from fastapi import HTTPException, status


class APIException(HTTPException):
    """Base API exception class."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code


class ValidationError(APIException):
    """Validation error exception carrying per-field messages."""

    def __init__(
        self,
        detail: str,
        field_errors: Optional[List[Dict[str, str]]] = None
    ):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
            error_code="VALIDATION_ERROR"
        )
        self.field_errors = field_errors or []

    @property
    def fields(self) -> List[str]:
        """Names of the fields that failed validation."""
        return [error["field"] for error in self.field_errors]


class NotFoundError(APIException):
    """Resource not found exception."""

    def __init__(self, resource: str, resource_id: Optional[str] = None):
        detail = f"{resource} not found"
        if resource_id:
            detail += f" with ID: {resource_id}"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code="NOT_FOUND"
        )


class UnauthorizedError(APIException):
    """Authentication required exception."""

    def __init__(self, detail: str = "Authentication required"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code="UNAUTHORIZED",
            headers={"WWW-Authenticate": "Bearer"}
        )


class BadRequestError(APIException):
    """Bad request exception."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code="BAD_REQUEST"
        )


class ConfirmationRequiredError(APIException):
    """Destructive action attempted without explicit confirmation."""

    def __init__(self, action: str):
        super().__init__(
            status_code=status.HTTP_428_PRECONDITION_REQUIRED,
            detail=f"Confirmation required to {action}",
            error_code="CONFIRMATION_REQUIRED"
        )


class StatusTransitionError(BadRequestError):
    """Status change not allowed by the configured lifecycle."""

    def __init__(self, current: str, target: str):
        super().__init__(f"Status cannot change from '{current}' to '{target}'")
        self.error_code = "STATUS_TRANSITION_NOT_ALLOWED"


class BackendError(APIException):
    """
    Failure reported by the housing backend or while reaching it.

    `body` keeps the backend's error payload verbatim so it can be passed
    through to the console's caller. `status_code` is the backend's status,
    or 502 when no response was received.
    """

    def __init__(
        self,
        operation: str,
        status_code: Optional[int] = None,
        body: Any = None
    ):
        self.operation = operation
        self.body = body
        self.backend_status = status_code
        super().__init__(
            status_code=status_code or status.HTTP_502_BAD_GATEWAY,
            detail=self._message_from_body(body) or f"Failed to {operation}",
            error_code="BACKEND_ERROR"
        )

    @property
    def message(self) -> str:
        """Human-readable message for banners and toasts."""
        return self.detail

    @staticmethod
    def _message_from_body(body: Any) -> Optional[str]:
        if isinstance(body, str) and body.strip():
            return body.strip()
        if isinstance(body, dict):
            for key in ("message", "error", "detail", "msg"):
                value = body.get(key)
                if isinstance(value, str) and value:
                    return value
        return None


# File upload exceptions
class FileUploadError(BadRequestError):
    """File upload error exception."""

    def __init__(self, detail: str):
        super().__init__(f"File upload error: {detail}")


class UnsupportedFileTypeError(FileUploadError):
    """Unsupported file type exception."""

    def __init__(self, file_type: str, supported_types: List[str]):
        supported = ", ".join(supported_types)
        super().__init__(f"Unsupported file type '{file_type}'. Supported types: {supported}")


class FileSizeExceededError(FileUploadError):
    """File size exceeded exception."""

    def __init__(self, size: int, max_size: int):
        super().__init__(f"File size {size} bytes exceeds maximum allowed size {max_size} bytes")
