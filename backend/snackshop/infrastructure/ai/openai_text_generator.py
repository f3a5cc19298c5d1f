"""OpenAI chat completions behind TextGeneratorPort.

Used to imagine snack names and descriptions. Completions are short and the
caller validates them, falling back to templates on anything unusable.
"""

import logging
import os
import time
from typing import Optional

from openai import APIError, APITimeoutError, AsyncOpenAI, AuthenticationError, RateLimitError

from ...domain.ai.ports import (
    TextGenerationAuthError,
    TextGenerationInvalidResponseError,
    TextGenerationRateLimitError,
    TextGenerationServiceError,
    TextGenerationTimeoutError,
    TextGeneratorPort,
)
from ...observability.metrics import model_calls_total, model_latency_ms

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You invent fictional exotic snack products for an online snack shop. "
    "Answer with the requested text only, no preamble, no markdown."
)

# Checked in order: APITimeoutError is itself an APIError
_SDK_ERRORS = (
    (AuthenticationError, TextGenerationAuthError),
    (RateLimitError, TextGenerationRateLimitError),
    (APITimeoutError, TextGenerationTimeoutError),
    (APIError, TextGenerationServiceError),
)


class OpenAITextGenerator(TextGeneratorPort):
    """Short completions from an OpenAI chat model."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-4o-mini",
        timeout: int = 30,
    ):
        """
        Args:
            api_key: Falls back to the OPENAI_API_KEY environment variable
            model: Chat model name
            timeout: Per-request timeout in seconds

        Raises:
            TextGenerationAuthError: No API key available
        """
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self.api_key:
            raise TextGenerationAuthError("No OpenAI API key configured for text generation")

        self.model = model
        self.client = AsyncOpenAI(api_key=self.api_key, timeout=timeout)

    async def generate(
        self,
        prompt: str,
        max_new_tokens: int = 60,
        temperature: float = 0.8,
        do_sample: bool = True,
    ) -> str:
        # Chat models have no greedy switch; temperature 0 is the closest
        started = time.perf_counter()
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=max_new_tokens,
                temperature=temperature if do_sample else 0.0,
            )
        except APIError as exc:
            model_calls_total.labels(call_type="text", status="error").inc()
            for sdk_error, domain_error in _SDK_ERRORS:
                if isinstance(exc, sdk_error):
                    raise domain_error(f"{self.model}: {exc}") from exc
            raise

        if not response.choices:
            model_calls_total.labels(call_type="text", status="error").inc()
            raise TextGenerationInvalidResponseError(f"{self.model} returned no choices")

        model_calls_total.labels(call_type="text", status="success").inc()
        model_latency_ms.labels(call_type="text").observe((time.perf_counter() - started) * 1000)

        return response.choices[0].message.content or ""
