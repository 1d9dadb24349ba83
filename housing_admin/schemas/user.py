"""
Pydantic schemas for user and admin accounts.
Passwords are write-only: they appear on create/update payloads, never on responses.
"""

from pydantic import EmailStr, Field, field_validator, model_validator
from typing import Optional

from housing_admin.schemas.common import CamelModel, EntityResponse


class UserBase(CamelModel):
    """Contact record shared by users and admins."""

    first_name: str = Field(..., min_length=1, max_length=100, description="First name", examples=["Jane"])
    last_name: str = Field(..., min_length=1, max_length=100, description="Last name", examples=["Doe"])
    email: EmailStr = Field(..., description="Email address", examples=["jane@x.com"])
    contact_number: str = Field(..., description="Phone number, digits only", examples=["0771234567"])
    address: str = Field(..., min_length=1, description="Postal address", examples=["12 Main St"])

    @field_validator("first_name", "last_name", "address", "contact_number")
    @classmethod
    def strip_text(cls, v):
        """Strip surrounding whitespace and reject blank values."""
        if not v or not v.strip():
            raise ValueError("Value cannot be empty")
        return v.strip()


class UserCreate(UserBase):
    """Payload for signing up a user or admin."""

    password: str = Field(..., min_length=6, max_length=128, description="Password (minimum 6 characters)")


class UserUpdate(CamelModel):
    """Partial update payload; omitted fields are left untouched by the backend."""

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    contact_number: Optional[str] = None
    address: Optional[str] = None
    password: Optional[str] = Field(None, min_length=6, max_length=128)


class UserResponse(EntityResponse):
    """User as returned by the backend."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    contact_number: str = ""
    address: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def initials(self) -> str:
        return f"{self.first_name[:1]}{self.last_name[:1]}".upper()


class AdminResponse(UserResponse):
    """Administrator account; same shape as a user."""

    role: str = "admin"


class PasswordChangeRequest(CamelModel):
    """Admin profile password change."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=128)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self
