"""Domain errors raised by services and mapped to HTTP status codes by the route handlers."""


class AppError(Exception):
    """Base class for expected domain failures; carries a user-facing message."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AuthenticationError(AppError):
    """Missing, invalid or expired session token (401)."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class InvalidTokenError(AuthenticationError):
    """Token signature, expiry or claims failed verification."""

    def __init__(self, message: str = "Invalid or expired token") -> None:
        super().__init__(message)


class InvalidCredentialsError(AppError):
    """Email exists but the password does not match (401)."""

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message)


class AuthorizationError(AppError):
    """Valid identity without the privilege for the requested action (403)."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message)


class SelfDeletionError(AuthorizationError):
    """An actor tried to delete their own account (400)."""

    def __init__(self, message: str = "You cannot delete your own account") -> None:
        super().__init__(message)


class DuplicateEmailError(AppError):
    """Another user already has this email (409)."""

    def __init__(self, message: str = "User with this email already exists") -> None:
        super().__init__(message)


class UserNotFoundError(AppError):
    """No user row matches the given id or email (404)."""

    def __init__(self, message: str = "User not found") -> None:
        super().__init__(message)
