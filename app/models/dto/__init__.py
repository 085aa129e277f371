# Data Transfer Objects (DTOs)
# Request/response models for the memory system surface

from app.models.dto.retrieval import (
    StoreMemoryOptions,
    SearchOptions,
    FocusModeConfig,
    RankedResult,
    RetrievalReport,
    MemoryStats,
)

__all__ = [
    "StoreMemoryOptions",
    "SearchOptions",
    "FocusModeConfig",
    "RankedResult",
    "RetrievalReport",
    "MemoryStats",
]
