"""Request/response schemas for auth endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from acquisitions.schemas.users import (
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    ROLE_USER,
    Role,
    UserOut,
    normalize_email,
)


class SignUpRequest(BaseModel):
    """Registration payload."""

    name: str = Field(..., min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN, description="Display name")
    email: EmailStr = Field(..., description="Email (sign-in key)")
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password")
    role: Role = Field(default=ROLE_USER, description="Role, defaults to user")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email_field(cls, v: Any) -> Any:
        return normalize_email(v)


class SignInRequest(BaseModel):
    """Credentials for sign-in."""

    email: EmailStr = Field(..., description="Email")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email_field(cls, v: Any) -> Any:
        return normalize_email(v)


class TokenClaims(BaseModel):
    """Identity fields embedded in a session token."""

    id: int
    email: str
    role: Role


class Actor(BaseModel):
    """Authenticated user performing the request (id, email, role)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    role: Role


class AuthResponse(BaseModel):
    """User returned after sign-up or sign-in; the token travels in the session cookie."""

    message: str
    user: UserOut


class MessageResponse(BaseModel):
    """Plain status message."""

    message: str
