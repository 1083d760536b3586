"""User service: CRUD over the users table with validation, duplicate detection and password hashing."""

import logging

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import DuplicateError, NotFound, ValidationError
from app.core.security import hash_password, verify_password
from app.models import ROLES, User
from app.schemas.auth import Identity
from app.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "Username, email, password, and role are required"

# Required columns that an update may change but never clear.
_NON_NULLABLE_UPDATE_FIELDS = frozenset({"username", "email", "role"})


def _validate_role(role: str) -> None:
    if role not in ROLES:
        raise ValidationError(f"Role must be one of: {', '.join(ROLES)}")


def _commit_or_duplicate(db: Session) -> None:
    """Commit; a unique-constraint violation becomes DuplicateError."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.info("Unique constraint rejected user write: %s", type(e.orig).__name__)
        raise DuplicateError() from e


def _find_conflict(
    db: Session, username: str | None, email: str | None, exclude_id: str | None = None
) -> User | None:
    """Advisory pre-check; the unique indexes remain the authoritative guard."""
    clauses = []
    if username is not None:
        clauses.append(User.username == username)
    if email is not None:
        clauses.append(User.email == email)
    if not clauses:
        return None
    query = db.query(User).filter(or_(*clauses))
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first()


def list_users(db: Session) -> list[User]:
    """Return every user; no pagination or ordering beyond the store default."""
    return db.query(User).all()


def get_user(db: Session, user_id: str) -> User:
    """Return the user with this id or raise NotFound."""
    user = db.get(User, user_id)
    if user is None:
        raise NotFound()
    return user


def create_user(db: Session, body: UserCreate) -> User:
    """
    Validate, check uniqueness, hash the password and persist a new user.

    Raises ValidationError when username, email, password or role is missing
    (or role is unknown) and DuplicateError when username or email is taken.
    Nothing is written on failure.
    """
    if not (body.username and body.email and body.password and body.role):
        raise ValidationError(REQUIRED_FIELDS_MESSAGE)
    _validate_role(body.role)

    if _find_conflict(db, body.username, body.email) is not None:
        raise DuplicateError()

    user = User(
        username=body.username,
        email=body.email,
        password_hash=hash_password(body.password),
        role=body.role,
        company=body.company,
        team=body.team,
        permissions=list(body.permissions or []),
    )
    db.add(user)
    _commit_or_duplicate(db)
    db.refresh(user)
    logger.info("User created: id=%s role=%s", user.id, user.role)
    return user


def update_user(db: Session, user_id: str, body: UserUpdate) -> User:
    """
    Apply only the fields present in body. A non-empty password is re-hashed;
    otherwise the stored hash is left unchanged.
    """
    user = get_user(db, user_id)
    changes = body.model_dump(exclude_unset=True)

    password = changes.pop("password", None)
    for field in _NON_NULLABLE_UPDATE_FIELDS:
        if field in changes and changes[field] is None:
            del changes[field]
    if changes.get("permissions", []) is None:
        del changes["permissions"]
    for field in ("username", "email"):
        if field in changes and not changes[field].strip():
            raise ValidationError(f"{field.capitalize()} cannot be empty")
    if "role" in changes:
        _validate_role(changes["role"])

    new_username = changes.get("username")
    new_email = changes.get("email")
    if (new_username is not None or new_email is not None) and _find_conflict(
        db, new_username, new_email, exclude_id=user.id
    ) is not None:
        raise DuplicateError()

    for field, value in changes.items():
        setattr(user, field, value)
    if password:
        user.password_hash = hash_password(password)

    _commit_or_duplicate(db)
    db.refresh(user)
    logger.info(
        "User updated: id=%s fields=%s password_changed=%s",
        user.id,
        sorted(changes),
        bool(password),
    )
    return user


def delete_user(db: Session, user_id: str) -> None:
    """Permanently remove the user or raise NotFound."""
    user = get_user(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("User deleted: id=%s", user_id)


def get_self(db: Session, identity: Identity) -> User:
    """Resolve the user referenced by the token's subject; NotFound if gone or absent."""
    if not identity.sub:
        raise NotFound()
    return get_user(db, identity.sub)


def authenticate_user(db: Session, username: str, password: str) -> User | None:
    """Return the user when the password verifies against the stored hash."""
    user = db.query(User).filter(User.username == username).first()
    if user is None:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user
