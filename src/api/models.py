"""Pydantic models for API request/response."""

from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator


class RegisterRequest(BaseModel):
    """Request model for user registration.

    Fields are optional here so that missing values reach the auth service
    and come back as a 400 with the standard error body.
    """
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[str] = None


class LoginRequest(BaseModel):
    """Request model for user login.

    Non-string values are treated as absent, so a malformed body is an
    authentication miss (401) rather than a request error.
    """
    email: Optional[str] = None
    password: Optional[str] = None

    @field_validator("email", "password", mode="before")
    @classmethod
    def non_string_as_missing(cls, v: Any) -> Optional[str]:
        return v if isinstance(v, str) else None


class UserSummaryResponse(BaseModel):
    """Public view of a registered user."""
    id: str = Field(..., description="User ID (MongoDB _id)")
    email: str = Field(..., description="User email")
    role: str = Field(..., description="reader, author or admin")


class TokenResponse(BaseModel):
    """Response model for login."""
    token: str = Field(..., description="Signed bearer token, valid for 12 hours")


class ClaimResponse(BaseModel):
    """Decoded identity token."""
    sub: str = Field(..., description="User ID")
    role: str
    email: str
    iat: int = Field(..., description="Issued at (Unix seconds)")
    exp: int = Field(..., description="Expires at (Unix seconds)")


class ErrorResponse(BaseModel):
    error: str
    detail: Optional[str] = None
