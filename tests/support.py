"""Shared helpers for tests: test settings, an in-memory SQLite store and a wired TestClient."""

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from acquisitions.core.config import Settings, get_settings
from acquisitions.core.database import get_db
from acquisitions.core.security import PasswordHasher, TokenService
from acquisitions.main import app
from acquisitions.models import Base
from acquisitions.schemas.auth import TokenClaims
from acquisitions.services.identity import IdentityService
from acquisitions.services.user_store import UserStore

TEST_PASSWORD = "s3cret-pass"


def make_settings(**overrides: object) -> Settings:
    """Settings for tests: SQLite, a fixed secret and the cheapest bcrypt cost."""
    values: dict[str, object] = {
        "APP_ENV": "dev",
        "DATABASE_URL": "sqlite://",
        "JWT_SECRET": "test-secret",
        "BCRYPT_ROUNDS": 4,
    }
    values.update(overrides)
    return Settings(**values)


def make_session_factory() -> sessionmaker:
    """
    One in-memory SQLite database per call. StaticPool keeps a single connection
    so every session (and TestClient worker thread) sees the same schema and rows.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


class ApiHarness:
    """TestClient wired to a fresh database, with helpers to seed users and mint tokens."""

    def __init__(self) -> None:
        self.settings = make_settings()
        self.session_factory = make_session_factory()
        self.tokens = TokenService(self.settings)

        def override_get_db():
            db = self.session_factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_settings] = lambda: self.settings
        self.client = TestClient(app)

    def close(self) -> None:
        self.client.close()
        app.dependency_overrides.clear()

    def create_user(self, name: str, email: str, role: str = "user", password: str = TEST_PASSWORD):
        db = self.session_factory()
        try:
            identity = IdentityService(UserStore(db), PasswordHasher.from_settings(self.settings))
            return identity.register(name, email, password, role)
        finally:
            db.close()

    def auth_headers(self, user) -> dict[str, str]:
        token = self.tokens.issue(TokenClaims(id=user.id, email=user.email, role=user.role))
        return {"Authorization": f"Bearer {token}"}
