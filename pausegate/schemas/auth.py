"""Authentication-related Pydantic schemas."""

import uuid

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Login response with the access token."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int  # Seconds until token expires


class UserProfile(BaseModel):
    """Signed-in user's profile."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    display_name: str
    role: str
