"""
Utility modules for the Housing Admin Console.
"""

from .exceptions import (
    APIException,
    ValidationError,
    NotFoundError,
    UnauthorizedError,
    BadRequestError,
    ConfirmationRequiredError,
    StatusTransitionError,
    BackendError,
    FileUploadError,
    UnsupportedFileTypeError,
    FileSizeExceededError
)

from .session import TokenRole, TokenStore, FileTokenStore, SessionContext

# Dependencies are imported directly where needed to avoid circular imports

__all__ = [
    # Exceptions
    "APIException",
    "ValidationError",
    "NotFoundError",
    "UnauthorizedError",
    "BadRequestError",
    "ConfirmationRequiredError",
    "StatusTransitionError",
    "BackendError",
    "FileUploadError",
    "UnsupportedFileTypeError",
    "FileSizeExceededError",

    # Session
    "TokenRole",
    "TokenStore",
    "FileTokenStore",
    "SessionContext",
]
