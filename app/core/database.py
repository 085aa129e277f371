"""
Database connection and session management.

Uses synchronous SQLAlchemy with NullPool pattern.
Connection pooling delegated to pgBouncer at infrastructure level.
Engine is built lazily so importing the package never opens a connection.
"""

import logging
from contextlib import contextmanager
from functools import lru_cache
from typing import Generator
from urllib.parse import urlparse

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from sqlmodel import Session, create_engine

from app.core.config import settings

logger = logging.getLogger(__name__)


def normalize_database_url(url: str) -> str:
    """Ensure URL specifies the psycopg (v3) driver."""
    if not url:
        raise ValueError("DATABASE_URL is not configured")

    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    if not url.startswith("postgresql+psycopg://"):
        raise ValueError("DATABASE_URL must start with postgresql:// or postgresql+psycopg://")
    return url


@lru_cache()
def get_engine() -> Engine:
    """Create the shared engine (singleton)."""
    database_url = normalize_database_url(settings.DATABASE_URL)

    # Parse database URL for logging (don't log password!)
    db_url = urlparse(database_url)
    logger.info(f"Database host: {db_url.hostname}:{db_url.port} / {db_url.path[1:]}")

    engine = create_engine(
        database_url,
        poolclass=NullPool,  # Let pgBouncer handle all pooling
        connect_args={
            "prepare_threshold": None,  # Disable prepared statements (pgBouncer transaction mode)
            "autocommit": False,
        },
        pool_pre_ping=True,
        echo=False
    )

    # Disable SQLAlchemy's prepared statement cache
    return engine.execution_options(postgresql_prepared_statement_cache_size=0)


@lru_cache()
def get_session_factory() -> sessionmaker:
    """Session factory bound to the shared engine."""
    return sessionmaker(
        bind=get_engine(),
        class_=Session,
        expire_on_commit=False,  # Prevents automatic refresh after commit
        autoflush=False,         # Explicit control over when to flush
    )


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """
    Context manager for database sessions.
    Auto-commits on success, auto-rolls back on exception.
    """
    session = get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
