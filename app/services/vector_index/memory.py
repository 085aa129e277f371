"""In-process vector index (local development and tests)."""

import copy
import logging
import math
from typing import Any

from .base import VectorIndex, VectorMatch
from .filters import matches_filter

logger = logging.getLogger(__name__)


def cosine_similarity(a: list[float], b: list[float]) -> float:
    """Cosine similarity of two equal-length vectors (0.0 if either is zero)."""
    if len(a) != len(b):
        raise ValueError(f"Dimension mismatch: {len(a)} != {len(b)}")

    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (norm_a * norm_b)


class InMemoryVectorIndex(VectorIndex):
    """Exhaustive cosine search over a dict. Not shared between processes."""

    def __init__(self, dimension: int | None = None):
        self._dimension = dimension
        self._vectors: dict[str, tuple[list[float], dict[str, Any]]] = {}

    def upsert(self, vector_id: str, values: list[float], metadata: dict[str, Any]) -> None:
        if self._dimension is not None and len(values) != self._dimension:
            raise ValueError(
                f"Vector {vector_id} has dimension {len(values)}, index expects {self._dimension}"
            )
        self._vectors[vector_id] = (list(values), copy.deepcopy(metadata))

    def query(
        self,
        vector: list[float],
        filter: dict[str, Any] | None = None,
        top_k: int = 10,
        include_metadata: bool = True,
    ) -> list[VectorMatch]:
        scored: list[VectorMatch] = []

        for vector_id, (values, metadata) in self._vectors.items():
            if not matches_filter(metadata, filter):
                continue
            scored.append(
                VectorMatch(
                    id=vector_id,
                    score=cosine_similarity(vector, values),
                    metadata=copy.deepcopy(metadata) if include_metadata else {},
                )
            )

        scored.sort(key=lambda m: m.score, reverse=True)
        return scored[:top_k]

    def delete(self, vector_ids: list[str]) -> None:
        for vector_id in vector_ids:
            self._vectors.pop(vector_id, None)

    def __len__(self) -> int:
        return len(self._vectors)

    @property
    def name(self) -> str:
        return "memory"
