"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., min_length=1, max_length=255, description="Username")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class TokenResponse(BaseModel):
    """JWT access token returned after successful login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")


class Identity(BaseModel):
    """Claims of a verified bearer token, attached to the request by the auth gate."""

    sub: str | None = Field(default=None, description="User id the token was issued for")
    role: str = Field(..., description="Role claim")
