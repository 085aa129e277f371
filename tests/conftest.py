"""
Pytest configuration and fixtures for testing.

Relational tests run against in-memory SQLite (one shared connection via
StaticPool); vector search runs through InMemoryVectorIndex with a
deterministic keyword embedding.
"""
import pytest
from datetime import datetime, timedelta, timezone

from sqlalchemy import event
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

# Import all models to ensure SQLAlchemy relationships are configured
from app.models.database.focus_sessions import FocusSession
from app.models.database.memories import Memory
from app.models.database.user import User, MemoryMode
from app.services.embeddings.base import EmbeddingProvider
from app.services.memory_system import MemorySystem
from app.services.vector_index.memory import InMemoryVectorIndex

# memory_vectors needs pgvector, so only the relational tables are created
SQLITE_TABLES = [User.__table__, Memory.__table__, FocusSession.__table__]

T0 = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

class KeywordEmbeddingProvider(EmbeddingProvider):
    """
    Bag-of-keywords embedding: one dimension per vocabulary word plus a
    constant bias so every vector is non-zero and loosely similar.
    """

    VOCABULARY = (
        "golf", "project", "update", "meeting", "morning", "coffee",
        "health", "doctor", "finance", "travel", "python", "family",
    )

    def __init__(self):
        self.calls = []

    def embed_text(self, text: str) -> list[float]:
        self.calls.append(text)
        lowered = text.lower()
        return [float(lowered.count(word)) for word in self.VOCABULARY] + [0.5]

    @property
    def dimension(self) -> int:
        return len(self.VOCABULARY) + 1

    @property
    def model_name(self) -> str:
        return "keyword-test"


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite does not emit BEGIN itself; without this SAVEPOINT is broken
    @event.listens_for(engine, "connect")
    def _do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        # Enforce memories.user_id -> users.id as PostgreSQL does
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    SQLModel.metadata.create_all(engine, tables=SQLITE_TABLES)
    yield engine
    engine.dispose()


@pytest.fixture(name="db_session", scope="function")
def db_session_fixture(engine):
    """
    Provides a clean database session for each test.

    Rolls back after completion.
    """
    session = Session(engine)
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def user(db_session) -> User:
    """Humanized-mode user."""
    user = User(email="alice@example.test", memory_mode=MemoryMode.HUMANIZED)
    db_session.add(user)
    db_session.flush()
    return user


@pytest.fixture
def other_user(db_session) -> User:
    user = User(email="bob@example.test", memory_mode=MemoryMode.HUMANIZED)
    db_session.add(user)
    db_session.flush()
    return user


# ---------------------------------------------------------------------------
# Memory system
# ---------------------------------------------------------------------------

@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def embeddings() -> KeywordEmbeddingProvider:
    return KeywordEmbeddingProvider()


@pytest.fixture
def vector_index(embeddings) -> InMemoryVectorIndex:
    return InMemoryVectorIndex(dimension=embeddings.dimension)


@pytest.fixture
def memory_system(db_session, embeddings, vector_index, clock) -> MemorySystem:
    return MemorySystem(db_session, embeddings=embeddings, vector_index=vector_index, clock=clock)
