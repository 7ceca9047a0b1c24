"""
BoardCtrl — Shared pytest fixtures.
"""

from __future__ import annotations

import os
import secrets
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# ─── Environment setup (before any app imports) ───────────────────────────────

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("JWT__SECRET", secrets.token_hex(32))
os.environ.setdefault("JWT__VALID_ISSUER", "boardctrl-tests")
os.environ.setdefault("JWT__VALID_AUDIENCE", "boardctrl-test-clients")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "1000")

# ─── App imports (after env is set) ───────────────────────────────────────────

from boardctrl.database import Base, seed_default_roles  # noqa: E402
from boardctrl.models import boards, users  # noqa: E402,F401
from boardctrl.models.boards import Board, Category  # noqa: E402

# ─────────────────────────────────────────────────────────────────────────────
# DATABASE FIXTURES
# ─────────────────────────────────────────────────────────────────────────────


def _make_engine():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def set_pragmas(dbapi_conn, _):
        cur = dbapi_conn.cursor()
        cur.execute("PRAGMA foreign_keys=ON")
        cur.close()

    Base.metadata.create_all(engine)
    return engine


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """In-memory SQLite session with the Admin (1) and User (2) roles seeded."""
    engine = _make_engine()
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestingSession()
    seed_default_roles(session)
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


# ─────────────────────────────────────────────────────────────────────────────
# FASTAPI CLIENT FIXTURE
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """FastAPI TestClient with overridden DB dependency."""
    from boardctrl.database import get_db
    from boardctrl.main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


# ─────────────────────────────────────────────────────────────────────────────
# JWT TOKEN FIXTURES
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def admin_token() -> str:
    from boardctrl.core.security import get_token_service

    return get_token_service().issue("admin", "Admin")


@pytest.fixture(scope="session")
def user_token() -> str:
    from boardctrl.core.security import get_token_service

    return get_token_service().issue("viewer", "User")


@pytest.fixture
def admin_headers(admin_token: str) -> dict:
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def user_headers(user_token: str) -> dict:
    return {"Authorization": f"Bearer {user_token}"}


# ─────────────────────────────────────────────────────────────────────────────
# CONTENT FIXTURES
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def category(db_session: Session) -> Category:
    cat = Category(title="Announcements", status=True, created_by="seed")
    db_session.add(cat)
    db_session.commit()
    return cat


@pytest.fixture
def board(db_session: Session, category: Category) -> Board:
    b = Board(
        title="Lobby Screen",
        description="Main entrance display",
        status=True,
        category_id=category.id,
        created_by="seed",
    )
    db_session.add(b)
    db_session.commit()
    return b
