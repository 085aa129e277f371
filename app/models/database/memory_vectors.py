"""Memory vectors - pgvector-backed storage for the vector index (PostgreSQL only)."""

from datetime import datetime
from typing import Any

from pgvector.sqlalchemy import Vector
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Column, Field, SQLModel

from app.core.config import settings
from app.models.database.mixins.timestamp import utc_now


class MemoryVector(SQLModel, table=True):
    """
    One embedded memory plus the metadata the index filters on.

    Shared across users: every query is scoped by meta->>'user_id'.
    """
    __tablename__ = "memory_vectors"

    id: str = Field(primary_key=True, max_length=255, description="Vector ID (referenced by memories.vector_id)")
    embedding: list[float] = Field(sa_column=Column(Vector(settings.EMBEDDING_DIMENSION), nullable=False))
    meta: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSONB, nullable=False))
    created_at: datetime = Field(default_factory=utc_now, nullable=False)
