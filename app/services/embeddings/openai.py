"""
OpenAI embedding provider.

Transient transport failures (rate limits, connection errors, timeouts,
5xx) are retried here with exponential backoff; anything else, and the
final failed attempt, propagates to the caller.
"""

import openai
from tenacity import (
    retry,
    wait_exponential,
    stop_after_attempt,
    retry_if_exception_type,
)

from .base import EmbeddingProvider

_TRANSIENT_ERRORS = (
    openai.RateLimitError,
    openai.APIConnectionError,
    openai.APITimeoutError,
    openai.InternalServerError,
)


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """OpenAI text-embedding-3-small provider."""

    def __init__(self, api_key: str, model: str = "text-embedding-3-small", dimension: int = 1536):
        self.client = openai.OpenAI(api_key=api_key)
        self._model = model
        self._dimension = dimension

    @retry(
        retry=retry_if_exception_type(_TRANSIENT_ERRORS),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        stop=stop_after_attempt(3),
        reraise=True,
    )
    def embed_text(self, text: str) -> list[float]:
        """Generate embedding for single text."""
        if not text or not text.strip():
            raise ValueError("Cannot embed empty text")

        response = self.client.embeddings.create(
            model=self._model,
            input=text
        )
        embedding = response.data[0].embedding

        if len(embedding) != self._dimension:
            raise ValueError(
                f"Embedding dimension {len(embedding)} does not match configured {self._dimension}"
            )
        return embedding

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def model_name(self) -> str:
        return self._model
