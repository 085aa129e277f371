"""User model - the owner of memories. Only memory_mode is managed here."""

from enum import Enum
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from app.models.database.mixins.timestamp import TimestampMixin


class MemoryMode(str, Enum):
    """How new memories for a user age."""
    PERSISTENT = "persistent"  # Everything forever, no decay
    HUMANIZED = "humanized"    # Time-based decay weighted by importance


class UserBase(SQLModel):
    """Shared fields for User model."""
    email: str | None = Field(default=None, max_length=255, nullable=True, description="User's email address")
    memory_mode: MemoryMode = Field(default=MemoryMode.HUMANIZED, description="Decay behaviour for new memories")


class User(UserBase, TimestampMixin, table=True):
    """User entity. Rows are owned by the account system; this core reads and toggles memory_mode."""
    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    is_deleted: bool = Field(default=False)
