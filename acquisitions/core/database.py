"""Relational store connection and session management."""

from collections.abc import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from acquisitions.core.config import Settings, settings


def build_engine(app_settings: Settings) -> Engine:
    """Create the engine for DATABASE_URL (SQLite needs cross-thread access for the threadpool)."""
    connect_args = {}
    if app_settings.DATABASE_URL.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(
        app_settings.DATABASE_URL,
        pool_pre_ping=True,
        echo=app_settings.DEBUG,
        connect_args=connect_args,
    )


engine = build_engine(settings)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
