"""JWT login and the auth gate dependencies (get_current_identity, require_role)."""

import logging
from collections.abc import Callable
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.exceptions import Forbidden, InvalidToken, Unauthenticated
from app.core.security import TokenService, get_token_service
from app.schemas.auth import Identity, LoginRequest, TokenResponse
from app.services.users import authenticate_user

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> TokenResponse:
    """
    Authenticate with username and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    user = authenticate_user(db, body.username, body.password)
    if user is None:
        logger.info("Login rejected for username=%s", body.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        )
    token = tokens.issue(sub=user.id, role=user.role)
    return TokenResponse(access_token=token, token_type="bearer")


def get_current_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> Identity:
    """
    Dependency: require a valid Bearer JWT and return its identity.
    Raises Unauthenticated without a token and InvalidToken when it does not verify.
    """
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()
    try:
        payload = tokens.verify(credentials.credentials)
    except jwt.PyJWTError as e:
        logger.debug("Token rejected: %s", type(e).__name__)
        raise InvalidToken() from e
    try:
        return Identity.model_validate(payload)
    except PydanticValidationError as e:
        raise InvalidToken() from e


def require_role(required_role: str) -> Callable[..., Identity]:
    """
    Build a dependency that admits only identities whose role equals required_role.

    Plain equality: there is no role hierarchy, so SuperAdmin does not satisfy Admin.
    """

    def _check_role(
        identity: Annotated[Identity, Depends(get_current_identity)],
    ) -> Identity:
        if identity.role != required_role:
            raise Forbidden(required_role)
        return identity

    return _check_role
