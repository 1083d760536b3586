"""ORM model for user records (credential store for auth and RBAC)."""

import uuid

from sqlalchemy import JSON, CheckConstraint, Column, String
from sqlalchemy.dialects.postgresql import JSONB

from app.models.base import Base

# Role enumeration; SuperAdmin is the top role.
ROLES = ("SuperAdmin", "Team", "Admin", "Staff", "User")
TOP_ROLE = "SuperAdmin"


def _new_user_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    username and email are unique at the storage layer; role is constrained to ROLES.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "role IN ({})".format(", ".join(f"'{r}'" for r in ROLES)),
            name="ck_users_role",
        ),
    )

    id = Column(String(36), primary_key=True, default=_new_user_id)
    username = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(320), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False)
    company = Column(String(255), nullable=True)
    team = Column(String(255), nullable=True)
    permissions = Column(
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=False,
        default=list,
    )
