"""AI Port Interfaces"""

from .embedding_provider_port import (
    EmbeddingProviderPort,
    EmbeddingResult,
    EmbeddingError,
    EmbeddingTimeoutError,
    EmbeddingRateLimitError,
    EmbeddingAuthError,
    EmbeddingServiceError,
    EmbeddingInvalidResponseError,
)
from .text_generator_port import (
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
