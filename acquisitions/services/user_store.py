"""Single-entity CRUD against the users table."""

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from acquisitions.core.exceptions import DuplicateEmailError, UserNotFoundError
from acquisitions.models import User
from acquisitions.models.user import utcnow

logger = logging.getLogger(__name__)

# Columns a caller may write; id and created_at are owned by the store.
WRITABLE_COLUMNS = frozenset({"name", "email", "password_hash", "role"})


def _is_unique_violation(exc: IntegrityError) -> bool:
    """True if the integrity error came from the unique email index."""
    text = str(exc.orig).lower()
    return "unique" in text or "duplicate" in text


class UserStore:
    """
    Data access for User rows. Every write commits on its own; updates and
    deletes are single conditional statements so a missing row surfaces as
    UserNotFoundError instead of a check-then-write race.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_email(self, email: str) -> User | None:
        return self.session.query(User).filter(User.email == email).first()

    def find_by_id(self, user_id: int) -> User | None:
        return self.session.query(User).filter(User.id == user_id).first()

    def email_taken(self, email: str, exclude_id: int | None = None) -> bool:
        """Return True if another row already uses this email."""
        query = self.session.query(User.id).filter(User.email == email)
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        return query.first() is not None

    def list_all(self) -> list[User]:
        return self.session.query(User).order_by(User.id).all()

    def insert(self, fields: dict[str, Any]) -> User:
        """Insert a user and return the persisted row. Raises DuplicateEmailError on the unique index."""
        values = self._writable(fields)
        now = utcnow()
        user = User(**values, created_at=now, updated_at=now)
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            if _is_unique_violation(e):
                raise DuplicateEmailError() from e
            raise
        self.session.refresh(user)
        return user

    def update_partial(self, user_id: int, fields: dict[str, Any]) -> User:
        """
        Apply a sparse update and refresh updated_at in one statement.
        Raises UserNotFoundError if no row has this id, DuplicateEmailError on the unique index.
        """
        values = self._writable(fields)
        values["updated_at"] = utcnow()
        try:
            updated = (
                self.session.query(User)
                .filter(User.id == user_id)
                .update(values, synchronize_session=False)
            )
            if updated == 0:
                self.session.rollback()
                raise UserNotFoundError()
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            if _is_unique_violation(e):
                raise DuplicateEmailError() from e
            raise
        # Row objects loaded earlier in this session are stale after the bulk update
        self.session.expire_all()
        user = self.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        return user

    def delete(self, user_id: int) -> None:
        """Delete a user by id. Raises UserNotFoundError if no row has this id."""
        deleted = (
            self.session.query(User)
            .filter(User.id == user_id)
            .delete(synchronize_session=False)
        )
        if deleted == 0:
            self.session.rollback()
            raise UserNotFoundError()
        self.session.commit()
        self.session.expire_all()

    @staticmethod
    def _writable(fields: dict[str, Any]) -> dict[str, Any]:
        unknown = set(fields) - WRITABLE_COLUMNS
        if unknown:
            raise ValueError(f"Unknown user columns: {', '.join(sorted(unknown))}")
        return dict(fields)
