"""
Memory Operations - Domain Logic Layer

Relational CRUD and aggregates for the Memory entity.
Follows static method pattern: no instance state, session passed as parameter.
No transaction management - callers handle commits/rollbacks; domain layer uses flush() only.
Every query is scoped by user_id.
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, and_, case, func, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from app.domain.exceptions import DuplicateEntityError
from app.models.database.memories import Memory, MemoryCreate, MemoryType, PrivacyLevel
from app.models.database.mixins.timestamp import utc_now
from app.models.dto.retrieval import MemoryStats


CONTENT_HASH_CONSTRAINT = "uq_memories_user_content_hash"


def _is_content_hash_conflict(exc: IntegrityError) -> bool:
    """True when the violation is the per-user content fingerprint constraint."""
    # psycopg exposes the constraint name; SQLite only names the columns
    diag = getattr(exc.orig, "diag", None)
    constraint = getattr(diag, "constraint_name", None)
    if constraint is not None:
        return constraint == CONTENT_HASH_CONSTRAINT

    message = str(exc.orig)
    return CONTENT_HASH_CONSTRAINT in message or "memories.user_id, memories.content_hash" in message


class MemoryOperations:
    """
    Domain operations for Memory entity.

    Pattern: Static methods, sync operations, no transaction management.
    """

    # ═══════════════════════════════════════════════════════════════════
    # Core CRUD Operations
    # ═══════════════════════════════════════════════════════════════════

    @staticmethod
    def create(session: Session, data: MemoryCreate) -> Memory:
        """
        Insert a memory inside a SAVEPOINT.

        Raises DuplicateEntityError when (user_id, content_hash) already exists;
        any other IntegrityError (e.g. unknown user_id) propagates unchanged.
        Either way only the savepoint is rolled back, the caller's transaction survives.
        Pattern: begin_nested → add → flush.
        """
        memory = Memory(**data.model_dump(exclude_none=True))

        try:
            with session.begin_nested():
                session.add(memory)
                session.flush()
        except IntegrityError as exc:
            if not _is_content_hash_conflict(exc):
                raise
            raise DuplicateEntityError(
                "Memory", f"user {data.user_id} already stores content {data.content_hash[:12]}"
            ) from exc

        return memory

    @staticmethod
    def get_by_content_hash(session: Session, user_id: UUID, content_hash: str) -> Optional[Memory]:
        """Find the user's memory with exactly this content fingerprint."""
        result = session.execute(
            select(Memory).where(
                and_(
                    Memory.user_id == user_id,
                    Memory.content_hash == content_hash,
                )
            )
        )
        return result.scalar_one_or_none()

    # ═══════════════════════════════════════════════════════════════════
    # Access Bookkeeping
    # ═══════════════════════════════════════════════════════════════════

    @staticmethod
    def record_access(
        session: Session,
        user_id: UUID,
        vector_ids: List[str],
        accessed_at: Optional[datetime] = None,
    ) -> int:
        """
        Increment access_count and stamp last_accessed_at for retrieved memories.

        Single batched UPDATE; returns number of rows touched.
        """
        if not vector_ids:
            return 0

        result = session.execute(
            update(Memory)
            .where(
                and_(
                    Memory.user_id == user_id,
                    Memory.vector_id.in_(vector_ids),
                )
            )
            .values(
                access_count=Memory.access_count + 1,
                last_accessed_at=accessed_at or utc_now(),
            )
            .execution_options(synchronize_session=False)
        )
        session.flush()
        return result.rowcount or 0

    # ═══════════════════════════════════════════════════════════════════
    # Aggregates
    # ═══════════════════════════════════════════════════════════════════

    @staticmethod
    def get_stats(session: Session, user_id: UUID) -> MemoryStats:
        """
        Aggregate a user's memories by type and privacy, with averages.

        Users without memories get zeroed stats (not an error).
        Averages use stored importance/strength (decay is never persisted).
        """
        stats = MemoryStats(user_id=user_id)

        totals = session.execute(
            select(
                func.count(Memory.id),
                func.avg(Memory.importance),
                func.avg(Memory.strength),
                func.sum(case((Memory.is_permanent.is_(True), 1), else_=0)),
            ).where(Memory.user_id == user_id)
        ).one()

        stats.total = totals[0] or 0
        if stats.total == 0:
            return stats

        stats.avg_importance = float(totals[1] or 0)
        stats.avg_strength = float(totals[2] or 0)
        stats.permanent = int(totals[3] or 0)

        type_rows = session.execute(
            select(Memory.memory_type, func.count(Memory.id))
            .where(Memory.user_id == user_id)
            .group_by(Memory.memory_type)
        ).all()
        for memory_type, count in type_rows:
            stats.by_type[MemoryType(memory_type).value] = count

        privacy_rows = session.execute(
            select(Memory.privacy_level, func.count(Memory.id))
            .where(Memory.user_id == user_id)
            .group_by(Memory.privacy_level)
        ).all()
        for privacy_level, count in privacy_rows:
            stats.by_privacy[PrivacyLevel(privacy_level).value] = count

        return stats
