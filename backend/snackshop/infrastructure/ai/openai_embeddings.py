"""OpenAI embeddings behind EmbeddingProviderPort.

Product texts and search queries are a few dozen tokens, far below the
8191-token input limit of the text-embedding-3 models, so nothing is
truncated here.
"""

import logging
import os
import time
from typing import Optional

from openai import APIError, APITimeoutError, AsyncOpenAI, AuthenticationError, RateLimitError

from ...domain.ai.ports import (
    EmbeddingAuthError,
    EmbeddingInvalidResponseError,
    EmbeddingProviderPort,
    EmbeddingRateLimitError,
    EmbeddingResult,
    EmbeddingServiceError,
    EmbeddingTimeoutError,
)
from ...observability.metrics import model_calls_total, model_latency_ms

logger = logging.getLogger(__name__)

# Checked in order: APITimeoutError is itself an APIError
_SDK_ERRORS = (
    (AuthenticationError, EmbeddingAuthError),
    (RateLimitError, EmbeddingRateLimitError),
    (APITimeoutError, EmbeddingTimeoutError),
    (APIError, EmbeddingServiceError),
)


class OpenAIEmbeddingAdapter(EmbeddingProviderPort):
    """Embeds text with the OpenAI embeddings endpoint.

    >>> adapter = OpenAIEmbeddingAdapter(model="text-embedding-3-small")
    >>> (await adapter.embed_text("Ube Cloud Puffs candy Philippines")).dimension
    1536
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "text-embedding-3-small",
        timeout: int = 30,
    ):
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self.api_key:
            raise EmbeddingAuthError("No OpenAI API key configured for embeddings")

        self.model = model
        self.timeout = timeout
        self.client = AsyncOpenAI(api_key=self.api_key, timeout=timeout)

    async def embed_text(self, text: str) -> EmbeddingResult:
        if not text or not text.strip():
            raise ValueError("Cannot embed blank text")

        started = time.perf_counter()
        try:
            response = await self.client.embeddings.create(model=self.model, input=text)
        except APIError as exc:
            model_calls_total.labels(call_type="embedding", status="error").inc()
            for sdk_error, domain_error in _SDK_ERRORS:
                if isinstance(exc, sdk_error):
                    raise domain_error(f"{self.model}: {exc}") from exc
            raise

        if not response.data:
            model_calls_total.labels(call_type="embedding", status="error").inc()
            raise EmbeddingInvalidResponseError(f"{self.model} returned no embedding")

        vector = [float(x) for x in response.data[0].embedding]
        model_calls_total.labels(call_type="embedding", status="success").inc()
        model_latency_ms.labels(call_type="embedding").observe((time.perf_counter() - started) * 1000)
        logger.debug(f"Embedded {len(text)} chars", extra={"model": self.model})

        return EmbeddingResult(
            embedding=vector,
            model=self.model,
            dimension=len(vector),
            tokens=getattr(response.usage, "total_tokens", 0) or 0,
        )
