"""Pydantic request/response schemas."""

from app.schemas.auth import Identity, LoginRequest, TokenResponse
from app.schemas.health import HealthResponse
from app.schemas.user import (
    MessageResponse,
    Role,
    UserCreate,
    UserRead,
    UserUpdate,
    UserUpdatedResponse,
)

__all__ = [
    "HealthResponse",
    "Identity",
    "LoginRequest",
    "MessageResponse",
    "Role",
    "TokenResponse",
    "UserCreate",
    "UserRead",
    "UserUpdate",
    "UserUpdatedResponse",
]
