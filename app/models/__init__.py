"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.user import ROLES, TOP_ROLE, User

__all__ = ["Base", "ROLES", "TOP_ROLE", "User"]
