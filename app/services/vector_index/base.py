"""Abstract base class for vector index backends."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class VectorMatch:
    """One nearest-neighbour hit."""

    id: str
    score: float
    """Cosine similarity to the query (higher = closer)."""

    metadata: dict[str, Any] = field(default_factory=dict)


class VectorIndex(ABC):
    """
    Approximate nearest-neighbour store with metadata filtering.

    Filters use Pinecone-style syntax: sibling keys are ANDed; operators
    $eq, $ne, $in, $nin, $gt, $gte, $lt, $lte, $and, $or. `$in` against a
    list-valued field matches when the lists intersect.
    """

    @abstractmethod
    def upsert(self, vector_id: str, values: list[float], metadata: dict[str, Any]) -> None:
        """Insert or replace one vector with its metadata."""
        pass

    @abstractmethod
    def query(
        self,
        vector: list[float],
        filter: dict[str, Any] | None = None,
        top_k: int = 10,
        include_metadata: bool = True,
    ) -> list[VectorMatch]:
        """Return up to top_k matches for vector, best first."""
        pass

    @abstractmethod
    def delete(self, vector_ids: list[str]) -> None:
        """Remove vectors by id (missing ids are ignored)."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend identifier for logging."""
        pass
