"""
BoardCtrl — Database Engine & Session Factory
Supports SQLite (local dev) and PostgreSQL / SQL Server (production).
"""

from __future__ import annotations

import logging
from typing import Generator

from sqlalchemy import create_engine, event, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from boardctrl.config import Settings, get_settings

logger = logging.getLogger("boardctrl.database")

DEFAULT_ROLES = ("Admin", "User")


class Base(DeclarativeBase):
    """Shared declarative base — all ORM models inherit from this."""

    pass


def _build_engine(settings: Settings) -> Engine:
    """Construct SQLAlchemy engine with appropriate settings for URL type."""
    database_url = settings.DATABASE_URL
    timeout = settings.QUERY_TIMEOUT_SECONDS

    if settings.is_sqlite:
        # SQLite uses SingletonThreadPool; pool_size/max_overflow are not supported
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False, "timeout": timeout},
            echo=False,
        )

        @event.listens_for(engine, "connect")
        def set_sqlite_pragmas(dbapi_conn, _connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.execute("PRAGMA synchronous=NORMAL")
            cursor.close()

    else:
        connect_args = {}
        if database_url.startswith("postgresql"):
            # statement_timeout is in milliseconds
            connect_args["options"] = f"-c statement_timeout={timeout * 1000}"
        engine = create_engine(
            database_url,
            connect_args=connect_args,
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,
            pool_timeout=timeout,
            echo=False,
        )

    return engine


# Build the engine once at import time
engine: Engine = _build_engine(get_settings())

# Session factory
SessionLocal: sessionmaker[Session] = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a SQLAlchemy Session.
    Automatically closes the session after the request.

    Usage:
        @router.get("/example")
        def example(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def seed_default_roles(db: Session) -> None:
    """Insert the Admin and User roles when the roles table is empty."""
    from boardctrl.models.users import Role

    if db.scalar(select(func.count()).select_from(Role)):
        return
    for name in DEFAULT_ROLES:
        db.add(Role(name=name, status=True, created_by="system"))
    db.commit()
    logger.info("Seeded default roles: %s", ", ".join(DEFAULT_ROLES))


def init_db(bind: Engine = engine) -> None:
    """
    Create all tables defined in all model modules and seed the default roles.
    Call this on application startup.
    """
    # Import all models so their table definitions are registered on Base.metadata
    from boardctrl.models import boards, users  # noqa: F401

    Base.metadata.create_all(bind=bind)

    with Session(bind) as db:
        seed_default_roles(db)
