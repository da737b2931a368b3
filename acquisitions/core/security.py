"""Password hashing and JWT creation/verification for session identity."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from acquisitions.core.config import Settings
from acquisitions.core.exceptions import InvalidTokenError
from acquisitions.schemas.auth import TokenClaims

# bcrypt only considers the first 72 bytes of the secret.
BCRYPT_MAX_BYTES = 72

REQUIRED_CLAIMS = ("sub", "email", "role", "exp", "iat")


class PasswordHasher:
    """bcrypt hashing with a fixed work factor taken from settings."""

    def __init__(self, rounds: int) -> None:
        self.rounds = rounds

    @classmethod
    def from_settings(cls, settings: Settings) -> "PasswordHasher":
        return cls(rounds=settings.BCRYPT_ROUNDS)

    def hash(self, plain_password: str) -> str:
        """Hash a plain-text password for storage. Do not store plain passwords."""
        pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, plain_password: str, hashed: str) -> bool:
        """Verify a plain password against a stored hash; False on mismatch or malformed hash."""
        pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        try:
            return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
        except (ValueError, TypeError):
            return False


class TokenService:
    """Issue and verify signed, time-bounded session tokens carrying id, email and role."""

    def __init__(self, settings: Settings) -> None:
        self._secret = settings.JWT_SECRET.get_secret_value()
        self._algorithm = settings.JWT_ALGORITHM
        self._lifetime = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)

    @property
    def max_age_seconds(self) -> int:
        return int(self._lifetime.total_seconds())

    def issue(self, claims: TokenClaims) -> str:
        """Create a JWT with sub (user id), email, role, iat and exp."""
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(claims.id),
            "email": claims.email,
            "role": claims.role,
            "iat": now,
            "exp": now + self._lifetime,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Decode and validate a JWT and return its identity claims.
        Raises InvalidTokenError on a bad signature, expiry, malformed token or missing claims.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": list(REQUIRED_CLAIMS)},
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except jwt.PyJWTError as e:
            raise InvalidTokenError() from e

        try:
            user_id = int(payload["sub"])
        except (TypeError, ValueError) as e:
            raise InvalidTokenError("Invalid token payload") from e
        email = payload.get("email")
        role = payload.get("role")
        if not isinstance(email, str) or role not in ("user", "admin"):
            raise InvalidTokenError("Invalid token payload")
        return TokenClaims(id=user_id, email=email, role=role)
