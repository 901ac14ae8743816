"""Shared fixtures: an in-memory SQLite database and an authenticated API client."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["APP_TIMEZONE"] = "UTC"

from roster_activity.config import get_settings  # noqa: E402

get_settings.cache_clear()

from roster_activity.infrastructure.database import (  # noqa: E402
    Base,
    SessionLocal,
    engine,
    initialize_database,
)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def reset_database():
    """Start every test from empty tables."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    pytest.importorskip("httpx")
    from fastapi.testclient import TestClient

    from main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    """Build bearer headers for ``owner_id`` (optionally scoped to a team)."""

    from roster_activity.domain.entities import Identity
    from roster_activity.infrastructure.security import create_access_token

    def _build(owner_id: str = "user-1", scope: str | None = "team-1") -> dict[str, str]:
        token = create_access_token(Identity(owner_id=owner_id, scope=scope))
        return {"Authorization": f"Bearer {token}"}

    return _build
