"""
Create a user (e.g. the first SuperAdmin, who can then log in and manage others). Run from project root:
  python -m app.scripts.create_user USERNAME EMAIL PASSWORD [role]
Example:
  python -m app.scripts.create_user root root@example.com your-secure-password SuperAdmin
"""
import argparse
import logging
import sys

from app.core.database import SessionLocal
from app.core.exceptions import DuplicateError, ValidationError
from app.core.logging import configure_logging
from app.models import ROLES, TOP_ROLE
from app.schemas.user import UserCreate
from app.services.users import create_user

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an RP user without an existing token.")
    parser.add_argument("username", help="Username (unique)")
    parser.add_argument("email", help="Email (unique)")
    parser.add_argument("password", help="Password (stored as a bcrypt hash)")
    parser.add_argument("role", nargs="?", default=TOP_ROLE, choices=list(ROLES))
    parser.add_argument("--company", default=None)
    parser.add_argument("--team", default=None)
    args = parser.parse_args(argv)

    configure_logging()
    body = UserCreate(
        username=args.username.strip(),
        email=args.email.strip(),
        password=args.password,
        role=args.role,
        company=args.company,
        team=args.team,
    )

    db = SessionLocal()
    try:
        user = create_user(db, body)
    except (ValidationError, DuplicateError) as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{user.username}' with role '{user.role}' (id {user.id}).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
