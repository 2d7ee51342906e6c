"""
Database engines and sessions for the project portal.

The application engine comes from DATABASE_URL; tests bind to a separate
engine from TEST_DATABASE_URL so they never touch application data.
"""
import os
from typing import Generator
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from .models import Base

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./project_portal.db")
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite://")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:")


def build_engine(url: str, echo: bool = False) -> Engine:
    """
    Create an engine for ``url``.

    SQLite connections may be shared across threads, and in-memory
    databases keep a single connection so every session sees the same data.
    Foreign keys are switched on for SQLite so project deletes cascade.
    """
    kwargs = {"echo": echo}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if _is_memory_sqlite(url):
            kwargs["poolclass"] = StaticPool

    new_engine = create_engine(url, **kwargs)

    if new_engine.dialect.name == "sqlite":
        @event.listens_for(new_engine, "connect")
        def enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return new_engine


engine = build_engine(DATABASE_URL, echo=SQL_ECHO)
test_engine = build_engine(TEST_DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def create_test_tables():
    Base.metadata.create_all(bind=test_engine)


def drop_test_tables():
    Base.metadata.drop_all(bind=test_engine)


# PUBLIC_INTERFACE
def get_db() -> Generator[Session, None, None]:
    """
    Dependency to get a database session, closed after the request.

    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


class DatabaseManager:
    """Schema setup and connectivity checks for the application database."""

    @staticmethod
    def init_db():
        """Create any missing tables."""
        Base.metadata.create_all(bind=engine)

    @staticmethod
    def ping(db: Session) -> bool:
        """Run a trivial query to check database connectivity."""
        return db.execute(text("SELECT 1")).scalar() == 1
