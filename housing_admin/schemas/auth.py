"""
Pydantic schemas for console authentication.
Tokens are issued by the housing backend; the console only stores and forwards them.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """Credentials forwarded to the backend login route."""

    email: str = Field(..., min_length=3, description="Account email", examples=["admin@example.com"])
    password: str = Field(..., min_length=1, description="Account password")


class LoginResponse(BaseModel):
    """Backend login answer; extra keys (admin/user records) are kept."""

    model_config = ConfigDict(extra="allow")

    token: Optional[str] = Field(None, description="Bearer token issued by the backend")
    message: Optional[str] = None


class SessionResponse(BaseModel):
    """Current console session as seen from the stored token."""

    authenticated: bool
    role: str
    subject: Optional[str] = None
    expires_at: Optional[datetime] = None
    expired: bool = False
    claims: Dict[str, Any] = Field(default_factory=dict)
