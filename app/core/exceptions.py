"""Error taxonomy for the auth gate and user service.

Each error carries the HTTP status and message surfaced to the client; the
handler registered in app.main renders them as ``{"message": ...}``.
"""

from fastapi import status


class UserServiceError(Exception):
    """Base for failures that map to a fixed status/message pair."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    headers: dict[str, str] | None = None

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class Unauthenticated(UserServiceError):
    """No bearer token on the request."""

    status_code = status.HTTP_401_UNAUTHORIZED
    headers = {"WWW-Authenticate": "Bearer"}

    def __init__(self, message: str = "Unauthorized: No token provided") -> None:
        super().__init__(message)


class InvalidToken(UserServiceError):
    """Bearer token present but not verifiable (signature, format, expiry, claims)."""

    status_code = status.HTTP_401_UNAUTHORIZED
    headers = {"WWW-Authenticate": "Bearer"}

    def __init__(self, message: str = "Unauthorized: Invalid token") -> None:
        super().__init__(message)


class Forbidden(UserServiceError):
    """Authenticated identity does not hold the required role."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, required_role: str) -> None:
        self.required_role = required_role
        super().__init__(f"Unauthorized: Requires {required_role} role")


class ValidationError(UserServiceError):
    """Missing or invalid user fields."""

    status_code = status.HTTP_400_BAD_REQUEST


class DuplicateError(UserServiceError):
    """Username or email already taken."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Username or email already exists") -> None:
        super().__init__(message)


class NotFound(UserServiceError):
    """No user record at the given identifier."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "User not found") -> None:
        super().__init__(message)
