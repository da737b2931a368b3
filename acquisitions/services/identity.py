"""Identity service: sign-up and sign-in over the user store and the password hasher."""

import logging

from acquisitions.core.exceptions import (
    DuplicateEmailError,
    InvalidCredentialsError,
    UserNotFoundError,
)
from acquisitions.core.security import PasswordHasher
from acquisitions.schemas.users import ROLE_USER, Role, UserOut, normalize_email
from acquisitions.services.user_store import UserStore

logger = logging.getLogger(__name__)


class IdentityService:
    """Registers new users and authenticates existing ones."""

    def __init__(self, store: UserStore, hasher: PasswordHasher) -> None:
        self.store = store
        self.hasher = hasher

    def register(self, name: str, email: str, password: str, role: Role = ROLE_USER) -> UserOut:
        """
        Create a user with a hashed password.

        Raises DuplicateEmailError if the email is already registered. The explicit
        check gives a clean error for the common case; the store maps a unique-index
        violation from a concurrent sign-up to the same error.
        """
        email = normalize_email(email)
        if self.store.email_taken(email):
            logger.warning("Sign-up rejected, email already registered: %s", email)
            raise DuplicateEmailError()

        user = self.store.insert(
            {
                "name": name,
                "email": email,
                "password_hash": self.hasher.hash(password),
                "role": role,
            }
        )
        logger.info("User %s registered with role %s", user.email, user.role)
        return UserOut.model_validate(user)

    def authenticate(self, email: str, password: str) -> UserOut:
        """
        Return the user whose credentials match.
        Raises UserNotFoundError for an unknown email, InvalidCredentialsError for a wrong password.
        """
        email = normalize_email(email)
        user = self.store.find_by_email(email)
        if user is None:
            logger.warning("Sign-in failed, unknown email: %s", email)
            raise UserNotFoundError()
        if not self.hasher.verify(password, user.password_hash):
            logger.warning("Sign-in failed, wrong password for %s", email)
            raise InvalidCredentialsError()
        logger.info("User %s signed in", user.email)
        return UserOut.model_validate(user)
