"""Password hashing and JWT issuance/verification for authentication."""

from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

import bcrypt
import jwt

from app.core.config import get_settings

# Bcrypt cost (rounds); 12 is a good default for security vs speed.
BCRYPT_ROUNDS = 12


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; longer input is truncated.
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


class TokenService:
    """
    Sign and verify bearer tokens with an explicitly configured key.

    Tokens carry ``sub`` (user id), ``role``, ``iat`` and ``exp``.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", expire_minutes: int = 60) -> None:
        if not secret:
            raise ValueError("Token signing secret must be non-empty")
        self._secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(self, sub: str | int | None, role: str) -> str:
        """Create a signed token for the given subject and role."""
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "role": role,
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
        }
        if sub is not None:
            payload["sub"] = str(sub)
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> dict[str, Any]:
        """
        Decode and validate a token; return its claims.
        Raises jwt.PyJWTError on bad signature, malformed or expired token.
        """
        return jwt.decode(token, self._secret, algorithms=[self.algorithm])


@lru_cache
def get_token_service() -> TokenService:
    """Token service built from settings (cached; one signing key per process)."""
    settings = get_settings()
    return TokenService(
        secret=settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
        expire_minutes=settings.JWT_EXPIRE_MINUTES,
    )
