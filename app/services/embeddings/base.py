"""Abstract base class for embedding providers."""

from abc import ABC, abstractmethod


class EmbeddingProvider(ABC):
    """Turns text into a fixed-length vector matching the vector index dimension."""

    @abstractmethod
    def embed_text(self, text: str) -> list[float]:
        """Generate embedding for single text."""
        pass

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Return embedding dimension."""
        pass

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Return model identifier for tracking."""
        pass
