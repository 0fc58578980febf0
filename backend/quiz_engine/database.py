"""Database engine and helpers.

This module configures the SQLModel/SQLAlchemy engine from
`settings.DATABASE_URL` (a local SQLite file by default) and provides
small helpers used by the application, scripts and tests.
"""

from sqlmodel import SQLModel, create_engine, Session
from .config import settings


def make_engine(url: str):
    """Create an engine, relaxing SQLite's same-thread check.

    Sessions are opened from request handlers and from the countdown
    ticker thread, so SQLite connections must be shareable.
    """
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, echo=False, connect_args=connect_args)


engine = make_engine(settings.DATABASE_URL)


def create_db_and_tables(bind=None):
    """Create database tables using SQLModel metadata.

    This function is intended for local development and lightweight
    scripts; production deployments should rely on a proper migration
    tool (alembic) instead.
    """
    # importing models registers every table on the metadata
    from . import models  # noqa: F401
    SQLModel.metadata.create_all(bind or engine)


def get_session():
    """Yield a database `Session` for FastAPI dependency injection.

    The generator yields a session and ensures it is closed when the
    request scope finishes.
    """
    with Session(engine) as session:
        yield session
