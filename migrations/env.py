"""Alembic environment configuration for synchronous migrations."""

from logging.config import fileConfig

from sqlalchemy import pool, create_engine
from sqlalchemy.engine import Connection

from alembic import context

# Import settings
from app.core.config import settings

# Import all models for autogenerate
from app.models.database.user import User
from app.models.database.memories import Memory
from app.models.database.focus_sessions import FocusSession
from app.models.database.memory_vectors import MemoryVector

# Import SQLModel's metadata
from sqlmodel import SQLModel

# Alembic Config object
config = context.config

# Interpret the config file for Python logging
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Set target metadata for autogenerate
target_metadata = SQLModel.metadata


def _migration_url() -> str:
    url = settings.MIGRATION_DATABASE_URL or settings.DATABASE_URL
    return url.replace("postgresql://", "postgresql+psycopg://", 1)


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    context.configure(
        url=_migration_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=target_metadata)

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode (synchronous)."""
    connectable = create_engine(
        _migration_url(),
        poolclass=pool.NullPool,
        connect_args={
            "options": "-c search_path=public"
        }
    )

    with connectable.connect() as connection:
        do_run_migrations(connection)

    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
