"""Database configuration and session management."""

from __future__ import annotations

from collections.abc import Generator, Iterator
from contextlib import contextmanager

import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from roster_activity.config import get_settings
from roster_activity.domain.exceptions import TransientStoreError


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


logger = logging.getLogger(__name__)


def build_engine(database_url: str) -> Engine:
    """Create the SQLAlchemy engine for ``database_url``.

    SQLite connections are shared across the threadpool used by FastAPI, and
    in-memory databases are pinned to a single connection so every session
    sees the same data.
    """

    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True)

    options: dict[str, object] = {"connect_args": {"check_same_thread": False}}
    if database_url in ("sqlite://", "sqlite:///:memory:"):
        options["poolclass"] = StaticPool
    return create_engine(database_url, **options)


settings = get_settings()
engine = build_engine(settings.database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def initialize_database(bind: Engine | None = None) -> None:
    """Ensure all ORM models have corresponding database tables."""

    from roster_activity.infrastructure import models  # noqa: F401  # ensure models are imported

    Base.metadata.create_all(bind=bind or engine, checkfirst=True)


def get_db() -> Generator:
    """Yield a database session and close it afterwards."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def store_operation(session: Session, description: str) -> Iterator[None]:
    """Translate database failures raised inside the block into ``TransientStoreError``.

    The session is rolled back so it stays usable for the caller's next
    operation.
    """

    try:
        yield
    except SQLAlchemyError as exc:
        session.rollback()
        logger.warning("Store operation '%s' failed: %s", description, exc)
        raise TransientStoreError(f"Could not {description}") from exc


__all__ = [
    "Base",
    "SessionLocal",
    "build_engine",
    "engine",
    "get_db",
    "initialize_database",
    "store_operation",
]
