"""ORM model for application users (auth and RBAC)."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Integer, String, func

from acquisitions.models.base import Base


def utcnow() -> datetime:
    return datetime.now(UTC)


class User(Base):
    """
    User account for cookie-based JWT sessions and role-based access control.

    role: 'admin' or 'user'. password_hash is never exposed by any read path.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="user", server_default="user")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
