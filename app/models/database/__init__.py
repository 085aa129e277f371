"""Database models - import all models to ensure proper registration."""

from app.models.database.user import User, MemoryMode
from app.models.database.memories import Memory, MemoryType, PrivacyLevel
from app.models.database.focus_sessions import FocusSession

__all__ = [
    "User",
    "MemoryMode",
    "Memory",
    "MemoryType",
    "PrivacyLevel",
    "FocusSession",
]
