"""Focus session model - a time-boxed retrieval boost for a set of categories."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlalchemy import Column
from sqlmodel import Field, SQLModel

from app.models.database.memories import JSONType
from app.models.database.mixins.timestamp import TimestampMixin, utc_now


class FocusSessionBase(SQLModel):
    """Shared fields for FocusSession model."""
    user_id: UUID = Field(foreign_key="users.id", index=True, description="Owner user ID")
    categories: list[str] = Field(default_factory=list, sa_column=Column(JSONType, nullable=False), description="Categories to boost")
    boost_factor: int = Field(default=200, gt=0, description="Score multiplier x100 (200 = 2.0x)")
    duration_hours: int = Field(default=1, gt=0, description="Length of the session")


class FocusSession(FocusSessionBase, TimestampMixin, table=True):
    """
    Focus session entity.

    At most one active session per user. Expiry is lazy: sessions past
    expires_at stay is_active=True until the next activation or
    deactivation, but are ignored by reads.
    """
    __tablename__ = "focus_sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    started_at: datetime = Field(default_factory=utc_now, nullable=False)
    expires_at: datetime = Field(index=True, nullable=False)
    is_active: bool = Field(default=True, index=True)
