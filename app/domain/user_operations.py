"""
User Operations - Domain Logic Layer

Reads and toggles a user's memory mode. User rows themselves are owned
by the account system.
"""

from uuid import UUID

from sqlalchemy import select
from sqlmodel import Session

from app.domain.exceptions import EntityNotFoundError
from app.models.database.user import User, MemoryMode


class UserOperations:
    """Domain operations for the memory-related part of User."""

    @staticmethod
    def get_memory_mode(session: Session, user_id: UUID) -> MemoryMode:
        """User's memory mode; users without a row default to humanized."""
        result = session.execute(
            select(User.memory_mode).where(User.id == user_id)
        )
        mode = result.scalar_one_or_none()
        return MemoryMode(mode) if mode is not None else MemoryMode.HUMANIZED

    @staticmethod
    def set_memory_mode(session: Session, user_id: UUID, mode: MemoryMode) -> User:
        """Persist the mode used for future writes. Raises EntityNotFoundError if user not found."""
        user = session.get(User, user_id)
        if not user or user.is_deleted:
            raise EntityNotFoundError("User", user_id)

        user.memory_mode = mode
        session.add(user)
        session.flush()
        return user
