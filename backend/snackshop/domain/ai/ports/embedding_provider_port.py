"""Port for turning text into embedding vectors.

Similarity search and the embedding cache only see this interface; the
OpenAI adapter and the test fakes both implement it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class EmbeddingResult:
    """One embedded text.

    ``dimension`` is fixed per model; vectors from different models must not
    be compared. ``tokens`` is 0 when the provider does not report usage.
    """
    embedding: list[float]
    model: str
    dimension: int
    tokens: int = 0


class EmbeddingProviderPort(ABC):

    @abstractmethod
    async def embed_text(self, text: str) -> EmbeddingResult:
        """Embed a product text or a search query.

        Raises:
            ValueError: Blank text
            EmbeddingError: Any provider failure, as one of the subclasses below
        """


class EmbeddingError(Exception):
    """Provider failure while embedding"""


class EmbeddingTimeoutError(EmbeddingError):
    pass


class EmbeddingRateLimitError(EmbeddingError):
    pass


class EmbeddingAuthError(EmbeddingError):
    """Missing or rejected credentials"""


class EmbeddingServiceError(EmbeddingError):
    pass


class EmbeddingInvalidResponseError(EmbeddingError):
    """Response without a usable vector"""
