"""Port for prompt-in, text-out models.

The product generator asks for names and descriptions through this port and
does its own cleanup of whatever comes back.
"""

from abc import ABC, abstractmethod


class TextGeneratorPort(ABC):

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        max_new_tokens: int = 60,
        temperature: float = 0.8,
        do_sample: bool = True,
    ) -> str:
        """Complete ``prompt`` and return the raw text.

        ``temperature`` only applies when ``do_sample`` is True.

        Raises:
            TextGenerationError: Any provider failure, as one of the subclasses below
        """


class TextGenerationError(Exception):
    """Provider failure while generating text"""


class TextGenerationTimeoutError(TextGenerationError):
    pass


class TextGenerationRateLimitError(TextGenerationError):
    pass


class TextGenerationAuthError(TextGenerationError):
    """Missing or rejected credentials"""


class TextGenerationServiceError(TextGenerationError):
    pass


class TextGenerationInvalidResponseError(TextGenerationError):
    """Response without any choice"""
