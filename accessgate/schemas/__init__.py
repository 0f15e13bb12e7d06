"""Pydantic request/response schemas."""

from accessgate.schemas.auth import (
    CurrentUser,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    TokenResponse,
    UserListItem,
    UsersListResponse,
)
from accessgate.schemas.health import HealthResponse

__all__ = [
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "RegisterRequest",
    "TokenResponse",
    "UserListItem",
    "UsersListResponse",
]
