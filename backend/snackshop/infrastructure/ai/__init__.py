"""AI Infrastructure - Adapters for text generation and embedding providers.

This module contains concrete implementations of AI domain ports.
"""

from .openai_embeddings import OpenAIEmbeddingAdapter
from .openai_text_generator import OpenAITextGenerator

__all__ = [
    "OpenAIEmbeddingAdapter",
    "OpenAITextGenerator",
]
