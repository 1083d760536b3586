"""Unit tests for app.services.users against an in-memory SQLite store."""

import unittest
from unittest.mock import patch

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.exceptions import DuplicateError, NotFound, ValidationError
from app.core.security import verify_password
from app.models import Base, User
from app.schemas.auth import Identity
from app.schemas.user import UserCreate, UserUpdate
from app.services.users import (
    REQUIRED_FIELDS_MESSAGE,
    authenticate_user,
    create_user,
    delete_user,
    get_self,
    get_user,
    list_users,
    update_user,
)


def _user_create(**overrides: object) -> UserCreate:
    """Build a valid UserCreate for tests."""
    fields: dict[str, object] = {
        "username": "testuser",
        "email": "test@example.com",
        "password": "testpassword",
        "role": "Admin",
        "company": "Test Company",
        "team": "Test Team",
        "permissions": ["read", "write"],
    }
    fields.update(overrides)
    return UserCreate(**fields)


class UserServiceTestCase(unittest.TestCase):
    """Fresh in-memory database per test; bcrypt cost lowered for speed."""

    def setUp(self) -> None:
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(engine)
        self.db: Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
        self.addCleanup(engine.dispose)
        self.addCleanup(self.db.close)
        patcher = patch("app.core.security.BCRYPT_ROUNDS", 4)
        patcher.start()
        self.addCleanup(patcher.stop)

    def count(self) -> int:
        return self.db.query(User).count()


class TestCreateUser(UserServiceTestCase):
    def test_creates_with_hashed_password(self) -> None:
        user = create_user(self.db, _user_create())
        self.assertTrue(user.id)
        self.assertEqual(user.username, "testuser")
        self.assertEqual(user.permissions, ["read", "write"])
        self.assertNotEqual(user.password_hash, "testpassword")
        self.assertTrue(verify_password("testpassword", user.password_hash))

    def test_missing_required_fields_rejected_without_write(self) -> None:
        for field in ("username", "email", "password", "role"):
            with self.subTest(field=field):
                with self.assertRaises(ValidationError) as ctx:
                    create_user(self.db, _user_create(**{field: None}))
                self.assertEqual(ctx.exception.message, REQUIRED_FIELDS_MESSAGE)
                self.assertEqual(self.count(), 0)

    def test_empty_string_counts_as_missing(self) -> None:
        with self.assertRaises(ValidationError):
            create_user(self.db, _user_create(password=""))
        self.assertEqual(self.count(), 0)

    def test_unknown_role_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            create_user(self.db, _user_create(role="Root"))
        self.assertEqual(self.count(), 0)

    def test_duplicate_username_rejected(self) -> None:
        create_user(self.db, _user_create())
        with self.assertRaises(DuplicateError) as ctx:
            create_user(self.db, _user_create(email="other@example.com"))
        self.assertEqual(ctx.exception.message, "Username or email already exists")
        self.assertEqual(self.count(), 1)

    def test_duplicate_email_rejected(self) -> None:
        create_user(self.db, _user_create())
        with self.assertRaises(DuplicateError):
            create_user(self.db, _user_create(username="other"))
        self.assertEqual(self.count(), 1)

    def test_unique_index_is_authoritative_when_precheck_misses(self) -> None:
        create_user(self.db, _user_create())
        with patch("app.services.users._find_conflict", return_value=None):
            with self.assertRaises(DuplicateError):
                create_user(self.db, _user_create(email="other@example.com"))
        self.assertEqual(self.count(), 1)


class TestReadAndDelete(UserServiceTestCase):
    def test_list_returns_all(self) -> None:
        create_user(self.db, _user_create())
        create_user(self.db, _user_create(username="testuser2", email="t2@example.com"))
        self.assertEqual(sorted(u.username for u in list_users(self.db)), ["testuser", "testuser2"])

    def test_get_unknown_raises_not_found(self) -> None:
        with self.assertRaises(NotFound) as ctx:
            get_user(self.db, "unknown-id")
        self.assertEqual(ctx.exception.message, "User not found")

    def test_delete_removes_record(self) -> None:
        user = create_user(self.db, _user_create())
        delete_user(self.db, user.id)
        self.assertEqual(self.count(), 0)

    def test_delete_unknown_raises_not_found(self) -> None:
        with self.assertRaises(NotFound):
            delete_user(self.db, "unknown-id")


class TestUpdateUser(UserServiceTestCase):
    def test_update_unknown_raises_not_found(self) -> None:
        with self.assertRaises(NotFound):
            update_user(self.db, "unknown-id", UserUpdate(username="x"))

    def test_new_password_rehashed(self) -> None:
        user = create_user(self.db, _user_create())
        old_hash = user.password_hash
        updated = update_user(self.db, user.id, UserUpdate(password="newpw"))
        self.assertNotEqual(updated.password_hash, old_hash)
        self.assertTrue(verify_password("newpw", updated.password_hash))

    def test_no_password_keeps_hash(self) -> None:
        user = create_user(self.db, _user_create())
        old_hash = user.password_hash
        updated = update_user(self.db, user.id, UserUpdate(team="Other Team"))
        self.assertEqual(updated.password_hash, old_hash)
        self.assertEqual(updated.team, "Other Team")

    def test_partial_update_keeps_other_fields(self) -> None:
        user = create_user(self.db, _user_create())
        updated = update_user(self.db, user.id, UserUpdate(username="updatedtestuser"))
        self.assertEqual(updated.username, "updatedtestuser")
        self.assertEqual(updated.email, "test@example.com")
        self.assertEqual(updated.company, "Test Company")
        self.assertEqual(updated.permissions, ["read", "write"])

    def test_explicit_null_for_required_field_ignored(self) -> None:
        user = create_user(self.db, _user_create())
        updated = update_user(self.db, user.id, UserUpdate(username=None, company=None))
        self.assertEqual(updated.username, "testuser")
        self.assertIsNone(updated.company)

    def test_blank_username_or_email_rejected(self) -> None:
        user = create_user(self.db, _user_create())
        for field in ("username", "email"):
            with self.subTest(field=field):
                with self.assertRaises(ValidationError):
                    update_user(self.db, user.id, UserUpdate(**{field: "  "}))
        self.db.refresh(user)
        self.assertEqual(user.username, "testuser")
        self.assertEqual(user.email, "test@example.com")

    def test_unknown_role_rejected(self) -> None:
        user = create_user(self.db, _user_create())
        with self.assertRaises(ValidationError):
            update_user(self.db, user.id, UserUpdate(role="Root"))

    def test_username_collision_rejected(self) -> None:
        create_user(self.db, _user_create())
        other = create_user(self.db, _user_create(username="other", email="o@example.com"))
        with self.assertRaises(DuplicateError):
            update_user(self.db, other.id, UserUpdate(username="testuser"))

    def test_keeping_own_username_is_not_a_collision(self) -> None:
        user = create_user(self.db, _user_create())
        updated = update_user(self.db, user.id, UserUpdate(username="testuser", team="T2"))
        self.assertEqual(updated.team, "T2")


class TestSelfAndAuthenticate(UserServiceTestCase):
    def test_get_self_resolves_subject(self) -> None:
        user = create_user(self.db, _user_create())
        me = get_self(self.db, Identity(sub=user.id, role=user.role))
        self.assertEqual(me.username, "testuser")

    def test_get_self_without_subject_not_found(self) -> None:
        with self.assertRaises(NotFound):
            get_self(self.db, Identity(role="Admin"))

    def test_get_self_after_delete_not_found(self) -> None:
        user = create_user(self.db, _user_create())
        identity = Identity(sub=user.id, role=user.role)
        delete_user(self.db, user.id)
        with self.assertRaises(NotFound):
            get_self(self.db, identity)

    def test_authenticate_user(self) -> None:
        create_user(self.db, _user_create())
        self.assertIsNotNone(authenticate_user(self.db, "testuser", "testpassword"))
        self.assertIsNone(authenticate_user(self.db, "testuser", "wrong"))
        self.assertIsNone(authenticate_user(self.db, "nobody", "testpassword"))


if __name__ == "__main__":
    unittest.main()
