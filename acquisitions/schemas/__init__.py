"""Pydantic request/response schemas."""

from acquisitions.schemas.auth import (
    Actor,
    AuthResponse,
    MessageResponse,
    SignInRequest,
    SignUpRequest,
    TokenClaims,
)
from acquisitions.schemas.health import HealthResponse
from acquisitions.schemas.users import (
    Role,
    UserOut,
    UserResponse,
    UsersListResponse,
    UserUpdate,
)

__all__ = [
    "Actor",
    "AuthResponse",
    "HealthResponse",
    "MessageResponse",
    "Role",
    "SignInRequest",
    "SignUpRequest",
    "TokenClaims",
    "UserOut",
    "UserResponse",
    "UsersListResponse",
    "UserUpdate",
]
