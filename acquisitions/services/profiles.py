"""Profile service: list, read, update and delete user profiles."""

import logging
from typing import Any

from acquisitions.core.exceptions import DuplicateEmailError, UserNotFoundError
from acquisitions.core.security import PasswordHasher
from acquisitions.schemas.users import UPDATABLE_FIELDS, UserOut, normalize_email
from acquisitions.services.user_store import UserStore

logger = logging.getLogger(__name__)


class ProfileService:
    """Profile management over the user store. Authorization is checked by the caller."""

    def __init__(self, store: UserStore, hasher: PasswordHasher) -> None:
        self.store = store
        self.hasher = hasher

    def list_all(self) -> list[UserOut]:
        users = [UserOut.model_validate(u) for u in self.store.list_all()]
        logger.info("Retrieved %s users", len(users))
        return users

    def get_by_id(self, user_id: int) -> UserOut:
        user = self.store.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        return UserOut.model_validate(user)

    def update(self, user_id: int, fields: dict[str, Any]) -> UserOut:
        """
        Apply a sparse update of name, email, password and role.

        The password is re-hashed before it is stored. Raises UserNotFoundError if
        the user does not exist and DuplicateEmailError if the new email belongs
        to another user.
        """
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        values: dict[str, Any] = {k: v for k, v in fields.items() if k != "password"}
        if "email" in values:
            values["email"] = normalize_email(values["email"])
            if self.store.email_taken(values["email"], exclude_id=user_id):
                raise DuplicateEmailError()
        if fields.get("password") is not None:
            values["password_hash"] = self.hasher.hash(fields["password"])

        user = self.store.update_partial(user_id, values)
        logger.info("User %s updated (%s)", user_id, ", ".join(sorted(fields)) or "no fields")
        return UserOut.model_validate(user)

    def remove(self, user_id: int) -> None:
        self.store.delete(user_id)
        logger.info("User %s deleted", user_id)
