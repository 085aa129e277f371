"""Memories model - one stored text snippet per row, linked to its vector."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Column, Field, SQLModel

from app.models.database.mixins.timestamp import TimestampMixin

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class MemoryType(str, Enum):
    """Maturity tier. Promotion between tiers happens outside this core."""
    WORKING = "working"
    CONSOLIDATED = "consolidated"
    WISDOM = "wisdom"


class PrivacyLevel(str, Enum):
    """Visibility tier, most to least visible."""
    PUBLIC = "public"
    CONTEXTUAL = "contextual"
    PRIVATE = "private"
    VAULT = "vault"          # Requires an authenticated read path; never searchable


class MemoryBase(SQLModel):
    """Shared fields for Memory model."""
    user_id: UUID = Field(foreign_key="users.id", index=True, description="Owner user ID")
    chat_id: str | None = Field(default=None, max_length=255, nullable=True, description="Originating chat, if any")
    content: str = Field(description="Full memory content (authoritative copy)")
    memory_type: MemoryType = Field(default=MemoryType.WORKING, index=True, description="Maturity tier")
    privacy_level: PrivacyLevel = Field(default=PrivacyLevel.CONTEXTUAL, index=True, description="Visibility tier")
    category: str | None = Field(default=None, max_length=255, nullable=True, index=True, description="Free-text label used by filters and focus mode")
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSONType, nullable=False), description="Free-text tags")
    importance: int = Field(default=5, ge=0, le=10, description="Importance (0-10)")


class Memory(MemoryBase, TimestampMixin, table=True):
    """Memory entity. Inherits created_at, updated_at from TimestampMixin."""
    __tablename__ = "memories"
    __table_args__ = (
        UniqueConstraint("user_id", "content_hash", name="uq_memories_user_content_hash"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    content_hash: str = Field(max_length=64, index=True, description="SHA-256 of content (exact-text dedup)")
    vector_id: str = Field(max_length=255, unique=True, description="ID of the vector in the vector index")

    strength: int = Field(default=10, ge=0, le=10, description="Stored strength; decay is computed at read time")
    decay_rate: int = Field(default=0, ge=0, le=100, description="Percent per month; 0 iff permanent")
    is_permanent: bool = Field(default=False, description="Created in persistent mode")
    requires_auth: bool = Field(default=False, description="True iff privacy_level is vault")

    access_count: int = Field(default=0, description="Number of retrievals that returned this memory")
    last_accessed_at: datetime | None = Field(default=None, nullable=True, description="Last retrieval time")

    meta: dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSONType, nullable=True), description="Source and context signals")


class MemoryCreate(MemoryBase):
    """Data required to create a Memory, including fields derived by the writer."""
    content_hash: str
    vector_id: str
    strength: int = Field(default=10, ge=0, le=10)
    decay_rate: int = Field(default=0, ge=0, le=100)
    is_permanent: bool = False
    requires_auth: bool = False
    meta: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None  # Defaults to now when omitted

