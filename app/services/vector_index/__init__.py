"""Vector index backends for memory retrieval."""

import logging
from functools import lru_cache
from typing import Optional

from app.core.config import settings
from .base import VectorIndex, VectorMatch
from .memory import InMemoryVectorIndex

logger = logging.getLogger(__name__)


@lru_cache()
def get_vector_index() -> Optional[VectorIndex]:
    """
    Get configured vector index (singleton).

    Returns None when VECTOR_INDEX_BACKEND is empty: the memory system then
    treats the backend as not configured.
    """
    backend = settings.VECTOR_INDEX_BACKEND.strip().lower()

    if not backend:
        logger.warning("Vector index not configured - memory system disabled")
        return None

    if backend == "pgvector":
        # Local import: pulls in pgvector + database engine only when selected
        from .pgvector import PgVectorIndex
        return PgVectorIndex()

    if backend == "memory":
        return InMemoryVectorIndex(dimension=settings.EMBEDDING_DIMENSION)

    raise ValueError(f"Unknown vector index backend: {settings.VECTOR_INDEX_BACKEND}")


__all__ = ["VectorIndex", "VectorMatch", "InMemoryVectorIndex", "get_vector_index"]
