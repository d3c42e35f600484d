# litrato/database.py
"""
Database engine, session factory, and metadata shared across the application.
"""

from __future__ import annotations

import logging
from typing import Any, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .core.config import settings

logger = logging.getLogger(__name__)

_POSTGRES_POOL_KWARGS: dict[str, Any] = {
    "pool_size": 5,
    "max_overflow": 10,
    "pool_timeout": 5,
    "pool_recycle": 300,
    "pool_pre_ping": True,
}


def build_engine(database_url: str) -> Engine:
    """
    Create an engine for the configured database.

    SQLite is used for local runs and tests; its connections are shared
    across FastAPI's worker threads and wait on the write lock instead of
    failing immediately.
    """
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite":
        return create_engine(
            database_url,
            future=True,
            connect_args={"check_same_thread": False, "timeout": 30},
        )
    return create_engine(database_url, future=True, **_POSTGRES_POOL_KWARGS)


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False,
)

Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Get database session with proper cleanup."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db() -> None:
    """Create tables for local development databases."""
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured")
