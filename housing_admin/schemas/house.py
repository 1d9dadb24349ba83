"""
Pydantic schemas for house registrations (property management shape).
Covers the compliance-oriented record: owner contact, amenities, photos and review status.
"""

from pydantic import Field, field_validator
from typing import Optional, List
import enum

from housing_admin.schemas.common import CamelModel, EntityResponse, UploadFailureResponse


class RegistrationStatus(str, enum.Enum):
    """Review status of a house registration."""
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    NEEDS_DOCUMENTS = "Needs Documents"


class HousePropertyType(str, enum.Enum):
    """Kinds of property that can be registered."""
    SINGLE_FAMILY_HOME = "Single Family Home"
    APARTMENT = "Apartment"
    CONDOMINIUM = "Condominium"
    TOWNHOUSE = "Townhouse"
    DUPLEX = "Duplex"
    STUDIO = "Studio"
    COMMERCIAL = "Commercial"
    LAND = "Land"


COMMON_AMENITIES = [
    "Garden",
    "Garage",
    "Security",
    "Borehole",
    "Swimming Pool",
    "Air Conditioning",
    "Balcony",
    "Built-in Cupboards",
    "Prepaid Electricity",
    "Parking",
    "Elevator",
    "Generator",
]


class Photo(CamelModel):
    """Stored photo reference."""

    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)


def _dedupe(values: List[str]) -> List[str]:
    seen = []
    for value in values:
        value = value.strip()
        if value and value not in seen:
            seen.append(value)
    return seen


class HouseBase(CamelModel):
    """Fields shared by registration payloads and responses."""

    user_id: Optional[str] = Field(None, description="Owning user")
    property_type: str = Field(HousePropertyType.SINGLE_FAMILY_HOME.value, description="Kind of property")
    address: str = Field(..., description="Property address")
    lat: Optional[str] = Field(None, description="Latitude")
    lng: Optional[str] = Field(None, description="Longitude")
    area: Optional[float] = Field(None, ge=0, description="Floor area")
    bedrooms: Optional[int] = Field(None, ge=0, le=50)
    bathrooms: Optional[int] = Field(None, ge=0, le=50)
    year_built: Optional[int] = Field(None, ge=1800, le=2100)
    owner_name: str = Field("", description="Owner full name")
    owner_phone: str = Field("", description="Owner phone number")
    owner_email: Optional[str] = None
    description: Optional[str] = None
    amenities: List[str] = Field(default_factory=list)
    photos: List[Photo] = Field(default_factory=list)
    status: RegistrationStatus = RegistrationStatus.PENDING

    @field_validator("amenities")
    @classmethod
    def unique_amenities(cls, v):
        """Amenities behave as an ordered set."""
        return _dedupe(v)

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        """Accept lower/snake-case spellings such as 'requires_documents'."""
        return parse_status(v)


def parse_status(value):
    """Map a loosely spelled status onto RegistrationStatus; unknown values pass through."""
    if isinstance(value, RegistrationStatus) or not isinstance(value, str):
        return value
    key = value.strip().lower().replace("_", " ")
    aliases = {
        "pending": RegistrationStatus.PENDING,
        "approved": RegistrationStatus.APPROVED,
        "rejected": RegistrationStatus.REJECTED,
        "needs documents": RegistrationStatus.NEEDS_DOCUMENTS,
        "requires documents": RegistrationStatus.NEEDS_DOCUMENTS,
    }
    return aliases.get(key, value)


class HouseCreate(HouseBase):
    """Payload for registering a house; new registrations start as Pending."""

    property_type: HousePropertyType = HousePropertyType.SINGLE_FAMILY_HOME
    owner_name: str = Field(..., min_length=1)
    owner_phone: str = Field(..., min_length=1)

    @field_validator("address", "owner_name", "owner_phone")
    @classmethod
    def strip_required(cls, v):
        if not v or not v.strip():
            raise ValueError("Value cannot be empty")
        return v.strip()


class HouseUpdate(CamelModel):
    """Partial update of a registration."""

    user_id: Optional[str] = None
    property_type: Optional[HousePropertyType] = None
    address: Optional[str] = None
    lat: Optional[str] = None
    lng: Optional[str] = None
    area: Optional[float] = Field(None, ge=0)
    bedrooms: Optional[int] = Field(None, ge=0, le=50)
    bathrooms: Optional[int] = Field(None, ge=0, le=50)
    year_built: Optional[int] = Field(None, ge=1800, le=2100)
    owner_name: Optional[str] = None
    owner_phone: Optional[str] = None
    owner_email: Optional[str] = None
    description: Optional[str] = None
    amenities: Optional[List[str]] = None
    photos: Optional[List[Photo]] = None
    status: Optional[RegistrationStatus] = None

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        return parse_status(v)


class HouseResponse(HouseBase, EntityResponse):
    """Registration as returned by the backend."""

    address: str = ""


class StatusUpdate(CamelModel):
    """Status transition request from the management tab."""

    status: RegistrationStatus

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        return parse_status(v)


class HouseDetailResponse(CamelModel):
    """Registration grouped into the tabs of the detail view."""

    id: str
    overview: dict
    details: dict
    photos: List[Photo]
    owner: dict
    management: dict


class RegistrationResult(CamelModel):
    """Registration saved together with the outcome of its photo uploads."""

    house: HouseResponse
    uploaded: List[Photo] = Field(default_factory=list)
    failed_uploads: List[UploadFailureResponse] = Field(default_factory=list)
