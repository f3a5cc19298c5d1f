"""Embedding Text - canonical text for product and query embeddings.

The embedding cache is keyed by this text, so the format must stay stable:
changing it silently invalidates every cached vector. Bump the cache
namespace when it changes.
"""

import re

from ...domain.shop import SnackProduct

_WHITESPACE = re.compile(r"\s+")


def generate_product_embedding_text(product: SnackProduct) -> str:
    """Build the embedding text for a product.

    Format: "{name} {description} {category} {origin}"

    Example:
        >>> generate_product_embedding_text(product)
        'Cosmic Yuzu Crunch Bright citrus chips. chips Japan'
    """
    return f"{product.name} {product.description} {product.category.value} {product.origin}"


def generate_query_embedding_text(query: str) -> str:
    """Normalize a free-text search query (trim, collapse whitespace)."""
    return _WHITESPACE.sub(" ", query).strip()
