"""Request/response schemas for auth and user endpoints."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from accessgate.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)


class RegisterRequest(BaseModel):
    """New account details."""

    username: str = Field(
        ...,
        min_length=USERNAME_MIN_LEN,
        max_length=USERNAME_MAX_LEN,
        description="Username",
    )
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
        description="Password",
    )


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(
        ...,
        min_length=USERNAME_MIN_LEN,
        max_length=USERNAME_MAX_LEN,
        description="Username",
    )
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LEN,
        max_length=PASSWORD_MAX_LEN,
        description="Password",
    )


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str


class TokenResponse(BaseModel):
    """Session token returned after successful login, with the account it belongs to."""

    access_token: str = Field(..., description="Signed session token (JWT)")
    token_type: str = Field(default="Bearer", description="Token type")
    expires_at: datetime = Field(..., description="Token expiry (UTC)")
    id: int
    username: str
    email: str
    roles: list[str]


class CurrentUser(BaseModel):
    """Authenticated account as seen by GET /users/me."""

    id: int | None = None
    username: str
    email: str | None = None
    roles: list[str]


class UserListItem(BaseModel):
    """User entry for admin list (no password)."""

    id: int
    username: str
    email: str
    roles: list[str]
    created_at: datetime | None = None


class UsersListResponse(BaseModel):
    """Response for GET /users/all (admin only)."""

    users: list[UserListItem]
