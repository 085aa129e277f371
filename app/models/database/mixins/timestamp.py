"""Timestamp mixin for created_at and updated_at fields."""

from datetime import datetime, timezone
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


class TimestampMixin(SQLModel):
    """Adds created_at and updated_at timestamps."""

    created_at: datetime = Field(
        default_factory=utc_now,
        nullable=False,
        description="When this record was created"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        nullable=False,
        sa_column_kwargs={"onupdate": utc_now},
        description="When this record was last updated"
    )
