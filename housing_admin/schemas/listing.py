"""
Pydantic schemas for property listings (market-facing shape).
Kept separate from house registrations: listings live in their own backend collection.
"""

from pydantic import Field, field_validator
from typing import Optional
import enum

from housing_admin.schemas.common import CamelModel, EntityResponse


class ListingType(str, enum.Enum):
    """Listing categories offered in the listings page."""
    APARTMENT = "Apartment"
    HOUSE = "House"
    CONDO = "Condo"
    TOWNHOUSE = "Townhouse"
    PENTHOUSE = "Penthouse"


class ListingContact(CamelModel):
    """Person to contact about a listing."""

    name: str = ""
    email: str = ""
    phone: str = ""


class ListingBase(CamelModel):
    """Fields shared by listing payloads and responses."""

    title: str = Field(..., description="Listing headline", examples=["Modern Downtown Apartment"])
    price: float = Field(..., ge=0, description="Asking price")
    location: str = Field(..., description="Neighbourhood or address")
    bedrooms: int = Field(0, ge=0, le=50)
    bathrooms: int = Field(0, ge=0, le=50)
    area: float = Field(0, ge=0)
    type: str = Field(ListingType.APARTMENT.value, description="Listing category")
    image: Optional[str] = Field(None, description="Cover image URL")
    user: ListingContact = Field(default_factory=ListingContact)


class ListingCreate(ListingBase):
    """Payload for publishing a listing."""

    type: ListingType = ListingType.APARTMENT

    @field_validator("title", "location")
    @classmethod
    def strip_required(cls, v):
        if not v or not v.strip():
            raise ValueError("Value cannot be empty")
        return v.strip()


class ListingUpdate(CamelModel):
    """Partial update of a listing."""

    title: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    location: Optional[str] = None
    bedrooms: Optional[int] = Field(None, ge=0, le=50)
    bathrooms: Optional[int] = Field(None, ge=0, le=50)
    area: Optional[float] = Field(None, ge=0)
    type: Optional[ListingType] = None
    image: Optional[str] = None
    user: Optional[ListingContact] = None


class ListingResponse(ListingBase, EntityResponse):
    """Listing as returned by the backend."""

    title: str = ""
    price: float = 0
    location: str = ""
    listed_date: Optional[str] = None
