"""Request/response schemas for user profiles."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

Role = Literal["user", "admin"]

ROLE_USER: Role = "user"
ROLE_ADMIN: Role = "admin"

NAME_MIN_LEN = 2
NAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 6
PASSWORD_MAX_LEN = 128

UPDATABLE_FIELDS = ("name", "email", "password", "role")


def normalize_email(value: Any) -> Any:
    """Trim and lower-case an email before validation, storage and lookup."""
    if isinstance(value, str):
        return value.strip().lower()
    return value


class UserOut(BaseModel):
    """Public view of a user. Has no password field by construction."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: Role
    created_at: datetime
    updated_at: datetime


class UserUpdate(BaseModel):
    """Sparse update: only keys present in the request body are changed."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(
        default=None, min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN, description="Display name"
    )
    email: EmailStr | None = Field(default=None, description="Email")
    password: str | None = Field(
        default=None, min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="New password"
    )
    role: Role | None = Field(default=None, description="Role (admin only)")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email_field(cls, v: Any) -> Any:
        return normalize_email(v)

    @model_validator(mode="after")
    def check_fields_present(self) -> "UserUpdate":
        provided = self.model_fields_set & set(UPDATABLE_FIELDS)
        if not provided:
            raise ValueError("At least one field must be provided for update")
        for field in provided:
            if getattr(self, field) is None:
                raise ValueError(f"{field} must not be null")
        return self

    def changes(self) -> dict[str, Any]:
        """Return only the fields the caller actually sent."""
        return self.model_dump(exclude_unset=True)


class UserResponse(BaseModel):
    """Single user wrapped with a status message."""

    message: str
    user: UserOut


class UsersListResponse(BaseModel):
    """Response for GET /users (admin only)."""

    message: str
    users: list[UserOut]
