"""Request/response schemas for user CRUD endpoints. No schema exposes the password hash."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["SuperAdmin", "Team", "Admin", "Staff", "User"]


class UserCreate(BaseModel):
    """
    Body for POST /users.

    Required fields are typed optional so the service can report every missing
    field with a single 400 message instead of a framework 422.
    """

    model_config = ConfigDict(extra="ignore")

    username: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=320)
    password: str | None = Field(default=None, max_length=128)
    role: str | None = Field(default=None, description="One of SuperAdmin, Team, Admin, Staff, User")
    company: str | None = Field(default=None, max_length=255)
    team: str | None = Field(default=None, max_length=255)
    permissions: list[str] | None = Field(default_factory=list, description="null is treated as an empty list")


class UserUpdate(BaseModel):
    """Body for PUT /users/{id}; only fields present in the request are applied."""

    model_config = ConfigDict(extra="ignore")

    username: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=320)
    password: str | None = Field(default=None, max_length=128)
    role: str | None = None
    company: str | None = Field(default=None, max_length=255)
    team: str | None = Field(default=None, max_length=255)
    permissions: list[str] | None = None


class UserRead(BaseModel):
    """User record as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: str
    role: Role
    company: str | None = None
    team: str | None = None
    permissions: list[str] = Field(default_factory=list)


class MessageResponse(BaseModel):
    """Acknowledgment body for create/delete and the shape of every error body."""

    message: str


class UserUpdatedResponse(BaseModel):
    """Response for PUT /users/{id}."""

    message: str
    user: UserRead
