"""User CRUD endpoints behind the auth gate."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.routes.auth import get_current_identity, require_role
from app.core.database import get_db
from app.models import TOP_ROLE
from app.schemas.auth import Identity
from app.schemas.user import (
    MessageResponse,
    UserCreate,
    UserRead,
    UserUpdate,
    UserUpdatedResponse,
)
from app.services import users as user_service

router = APIRouter()

require_top_role = require_role(TOP_ROLE)


@router.get("", response_model=list[UserRead])
def list_users(
    _admin: Annotated[Identity, Depends(require_top_role)],
    db: Annotated[Session, Depends(get_db)],
) -> list[UserRead]:
    """List all users (SuperAdmin only)."""
    return [UserRead.model_validate(u) for u in user_service.list_users(db)]


@router.post("", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    _identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[Session, Depends(get_db)],
    body: UserCreate | None = None,
) -> MessageResponse:
    """Create a user. username, email, password and role are required; a missing body lacks all four."""
    user_service.create_user(db, body if body is not None else UserCreate())
    return MessageResponse(message="User created successfully")


# Registered before /{user_id} so "me" is not taken as an id.
@router.get("/me", response_model=UserRead)
def get_me(
    identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[Session, Depends(get_db)],
) -> UserRead:
    """Return the profile of the user the token was issued for."""
    return UserRead.model_validate(user_service.get_self(db, identity))


@router.get("/{user_id}", response_model=UserRead)
def get_user(
    user_id: str,
    _identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[Session, Depends(get_db)],
) -> UserRead:
    """Return one user by id (any authenticated caller); the password hash is never included."""
    return UserRead.model_validate(user_service.get_user(db, user_id))


@router.put("/{user_id}", response_model=UserUpdatedResponse)
def update_user(
    user_id: str,
    body: UserUpdate,
    _identity: Annotated[Identity, Depends(get_current_identity)],
    db: Annotated[Session, Depends(get_db)],
) -> UserUpdatedResponse:
    """Partial update: only fields present in the body change. A new password is re-hashed."""
    user = user_service.update_user(db, user_id, body)
    return UserUpdatedResponse(
        message="User updated successfully",
        user=UserRead.model_validate(user),
    )


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: str,
    _admin: Annotated[Identity, Depends(require_top_role)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Delete a user permanently (SuperAdmin only)."""
    user_service.delete_user(db, user_id)
    return MessageResponse(message="User deleted successfully")
