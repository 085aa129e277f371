"""
Retrieval DTOs.

Option models validate caller input at the boundary (pydantic raises
ValidationError for out-of-range values); result models carry rescored
vector matches and aggregate statistics back to the caller.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.core.config import settings
from app.models.database.memories import MemoryType, PrivacyLevel
from app.models.database.user import MemoryMode


class StoreMemoryOptions(BaseModel):
    """Options for writing a memory."""

    chat_id: Optional[str] = Field(default=None, description="Originating chat, if any")
    privacy_level: PrivacyLevel = Field(default=PrivacyLevel.CONTEXTUAL)
    category: Optional[str] = Field(default=None, max_length=255)
    tags: List[str] = Field(default_factory=list)
    importance: int = Field(default=5, ge=0, le=10, description="Importance (0-10); drives decay rate")
    memory_type: MemoryType = Field(default=MemoryType.WORKING)


class SearchOptions(BaseModel):
    """
    Options for semantic memory search.

    Privacy: private memories are only visible with include_private=True;
    vault memories are never visible through search.
    """

    top_k: int = Field(default_factory=lambda: settings.DEFAULT_TOP_K, ge=1, le=100)
    include_private: bool = False
    private_tags: List[str] = Field(default_factory=list)
    categories: Optional[List[str]] = None
    memory_types: Optional[List[MemoryType]] = None
    min_importance: Optional[int] = Field(default=None, ge=0, le=10)


class FocusModeConfig(BaseModel):
    """Focus mode activation request."""

    categories: List[str] = Field(min_length=1, description="Categories to boost")
    boost_factor: float = Field(default=2.0, ge=0.01, le=10.0, description="Score multiplier (2.0 = double); stored x100")
    duration_hours: int = Field(default=1, gt=0, le=24 * 30, description="Session length in hours")

    @field_validator("categories")
    @classmethod
    def _strip_empty(cls, value: List[str]) -> List[str]:
        cleaned = [c.strip() for c in value if c and c.strip()]
        if not cleaned:
            raise ValueError("categories must contain at least one non-empty value")
        return cleaned


class RankedResult(BaseModel):
    """
    One search hit after rescoring.

    score is the final ranking score; similarity is the raw score returned
    by the vector index. current_strength is set only when decay was applied.
    """

    vector_id: str
    score: float
    similarity: float
    current_strength: Optional[float] = None
    boosted: bool = False
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def content(self) -> str:
        return self.metadata.get("content", "")

    @property
    def category(self) -> str:
        return self.metadata.get("category") or ""


class RetrievalReport(BaseModel):
    """Search results plus counts describing what the rescoring did."""

    results: List[RankedResult] = Field(default_factory=list)
    mode: Optional[MemoryMode] = None
    candidates: int = 0
    decayed: int = 0
    forgotten: int = 0
    boosted: int = 0
    focus_active: bool = False
    backend_configured: bool = True


class MemoryStats(BaseModel):
    """Read-only aggregate over a user's stored memories."""

    user_id: UUID
    total: int = 0
    by_type: Dict[str, int] = Field(default_factory=lambda: {t.value: 0 for t in MemoryType})
    by_privacy: Dict[str, int] = Field(default_factory=lambda: {p.value: 0 for p in PrivacyLevel})
    avg_importance: float = 0.0
    avg_strength: float = 0.0
    permanent: int = 0

