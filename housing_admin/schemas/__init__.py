"""
Pydantic schemas for backend entities and console requests/responses.
"""

from .common import (
    CamelModel,
    EntityResponse,
    ResourceListResponse,
    MessageResponse,
    UploadFailureResponse,
    PreviewResponse
)

from .auth import LoginRequest, LoginResponse, SessionResponse

from .user import (
    UserBase,
    UserCreate,
    UserUpdate,
    UserResponse,
    AdminResponse,
    PasswordChangeRequest
)

from .house import (
    RegistrationStatus,
    HousePropertyType,
    Photo,
    HouseCreate,
    HouseUpdate,
    HouseResponse,
    HouseDetailResponse,
    StatusUpdate,
    RegistrationResult
)

from .listing import (
    ListingType,
    ListingContact,
    ListingCreate,
    ListingUpdate,
    ListingResponse
)

from .report import (
    DocumentMeta,
    ReportCreate,
    ReportUpdate,
    ReportResponse
)

__all__ = [
    # Common
    "CamelModel",
    "EntityResponse",
    "ResourceListResponse",
    "MessageResponse",
    "UploadFailureResponse",
    "PreviewResponse",

    # Authentication
    "LoginRequest",
    "LoginResponse",
    "SessionResponse",

    # Users and admins
    "UserBase",
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "AdminResponse",
    "PasswordChangeRequest",

    # House registrations
    "RegistrationStatus",
    "HousePropertyType",
    "Photo",
    "HouseCreate",
    "HouseUpdate",
    "HouseResponse",
    "HouseDetailResponse",
    "StatusUpdate",
    "RegistrationResult",

    # Listings
    "ListingType",
    "ListingContact",
    "ListingCreate",
    "ListingUpdate",
    "ListingResponse",

    # Reports
    "DocumentMeta",
    "ReportCreate",
    "ReportUpdate",
    "ReportResponse"
]
