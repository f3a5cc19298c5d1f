"""Embedding Services - product embedding text, caching and similarity search.

This module provides services for:
- Canonical text generation from product data
- Embedding generation and caching
- Cosine-similarity ranking
"""

from .embedding_text import generate_product_embedding_text, generate_query_embedding_text
from .vector_search import cosine_similarity, rank_by_similarity
from .embedding_service import EmbeddingService

__all__ = [
    "generate_product_embedding_text",
    "generate_query_embedding_text",
    "cosine_similarity",
    "rank_by_similarity",
    "EmbeddingService",
]
