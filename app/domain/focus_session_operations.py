"""
Focus Session Operations - Domain Logic Layer

At most one active focus session per user (last-write-wins).
Expiry is lazy: reads ignore sessions past expires_at; the next
activation or deactivation flips them to inactive.

Pattern: Static methods, session passed explicitly, flush() only.
"""

from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, and_, update
from sqlmodel import Session

from app.models.database.focus_sessions import FocusSession
from app.models.database.mixins.timestamp import utc_now


class FocusSessionOperations:
    """Domain operations for FocusSession entity."""

    @staticmethod
    def deactivate_all(session: Session, user_id: UUID) -> int:
        """Mark every active session for the user inactive (expired or not). Returns count."""
        result = session.execute(
            update(FocusSession)
            .where(
                and_(
                    FocusSession.user_id == user_id,
                    FocusSession.is_active.is_(True),
                )
            )
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        session.flush()
        return result.rowcount or 0

    @staticmethod
    def activate(
        session: Session,
        user_id: UUID,
        categories: List[str],
        boost_factor_x100: int,
        duration_hours: int,
        now: Optional[datetime] = None,
    ) -> FocusSession:
        """
        Start a new focus session, replacing any active one.

        Pattern: deactivate existing → create → add → flush.
        """
        now = now or utc_now()

        FocusSessionOperations.deactivate_all(session, user_id)

        focus = FocusSession(
            user_id=user_id,
            categories=list(categories),
            boost_factor=boost_factor_x100,
            duration_hours=duration_hours,
            started_at=now,
            expires_at=now + timedelta(hours=duration_hours),
            is_active=True,
        )
        session.add(focus)
        session.flush()
        return focus

    @staticmethod
    def get_active(
        session: Session,
        user_id: UUID,
        now: Optional[datetime] = None,
    ) -> Optional[FocusSession]:
        """Active session whose window has not passed (now < expires_at), or None."""
        now = now or utc_now()

        result = session.execute(
            select(FocusSession)
            .where(
                and_(
                    FocusSession.user_id == user_id,
                    FocusSession.is_active.is_(True),
                    FocusSession.expires_at > now,
                )
            )
            .order_by(FocusSession.started_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()
