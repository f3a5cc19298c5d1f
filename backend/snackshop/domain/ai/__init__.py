"""AI domain layer - Ports for text generation and embedding providers"""

from .ports import (
    EmbeddingProviderPort,
    EmbeddingResult,
    EmbeddingError,
    EmbeddingTimeoutError,
    EmbeddingRateLimitError,
    EmbeddingAuthError,
    EmbeddingServiceError,
    EmbeddingInvalidResponseError,
    TextGeneratorPort,
    TextGenerationError,
    TextGenerationTimeoutError,
    TextGenerationRateLimitError,
    TextGenerationAuthError,
    TextGenerationServiceError,
    TextGenerationInvalidResponseError,
)

__all__ = [
    "EmbeddingProviderPort",
    "EmbeddingResult",
    "EmbeddingError",
    "EmbeddingTimeoutError",
    "EmbeddingRateLimitError",
    "EmbeddingAuthError",
    "EmbeddingServiceError",
    "EmbeddingInvalidResponseError",
    "TextGeneratorPort",
    "TextGenerationError",
    "TextGenerationTimeoutError",
    "TextGenerationRateLimitError",
    "TextGenerationAuthError",
    "TextGenerationServiceError",
    "TextGenerationInvalidResponseError",
]
