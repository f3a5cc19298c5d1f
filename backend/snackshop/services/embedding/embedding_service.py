"""Embedding Service - cached embeddings and similarity search for products.

Embeddings are computed lazily: a product gets its vector the first time it
takes part in a search, and vectors are cached by their source text so the
same text is never embedded twice within the cache TTL.

Failures never propagate to callers. A text that cannot be embedded is
logged and treated as "no vector"; products without a vector are left out
of the ranking.

Vectors from different embedding models are never mixed: cached vectors are
keyed by model name, and a product still carrying a vector of another
dimension (say after EMBEDDING_MODEL changed) is re-embedded before ranking.
"""

import asyncio
import logging
from typing import Optional, Sequence

from ...domain.shop import SnackProduct
from ...domain.storage import KeyValueStoreError
from ..ai.model_runtime import ModelRuntime
from ..cache.product_cache import ProductCache
from .embedding_text import generate_product_embedding_text, generate_query_embedding_text
from .vector_search import rank_by_similarity

logger = logging.getLogger(__name__)


class EmbeddingService:
    """Embeds products and queries and ranks products by similarity.

    Args:
        runtime: Owner of the embedding model
        cache: Product cache (also stores embedding vectors)
        model_name: Embedding model name, prefixed to cached texts
    """

    def __init__(self, runtime: ModelRuntime, cache: ProductCache, model_name: Optional[str] = None):
        self.runtime = runtime
        self.cache = cache
        self.model_name = model_name

    def _cache_text(self, text: str) -> str:
        return f"{self.model_name}|{text}" if self.model_name else text

    async def embed(self, text: str) -> Optional[list[float]]:
        """Return the embedding for text, from cache or from the model.

        Returns:
            The vector, or None if the text is empty or embedding failed
        """
        if not text or not text.strip():
            return None

        cache_text = self._cache_text(text)
        try:
            cached = self.cache.get_embedding(cache_text)
        except KeyValueStoreError as e:
            logger.warning(f"Embedding cache read failed: {e}")
            cached = None
        if cached is not None:
            return cached

        try:
            model = await self.runtime.embedding_model.get()
            result = await model.embed_text(text)
        except Exception as e:
            logger.warning(f"Embedding failed: {e}")
            return None

        try:
            self.cache.put_embedding(cache_text, result.embedding)
        except KeyValueStoreError as e:
            logger.warning(f"Embedding cache write failed: {e}")

        return result.embedding

    async def product_embedding(self, product: SnackProduct) -> Optional[list[float]]:
        """Embed a product from its name, description, category and origin."""
        return await self.embed(generate_product_embedding_text(product))

    async def ensure_embeddings(
        self,
        products: Sequence[SnackProduct],
        dimension: Optional[int] = None,
    ) -> None:
        """Attach embeddings to products that lack one (mutates in place).

        With ``dimension`` set, products whose vector has another length are
        re-embedded too.
        """
        missing = [
            product for product in products
            if product.embedding is None
            or (dimension is not None and len(product.embedding) != dimension)
        ]
        if not missing:
            return

        stale = sum(1 for product in missing if product.embedding is not None)
        if stale:
            logger.info(f"Re-embedding {stale} products with {dimension}-incompatible vectors")

        vectors = await asyncio.gather(*(self.product_embedding(p) for p in missing))
        for product, vector in zip(missing, vectors):
            product.embedding = vector

    async def find_similar(
        self,
        target: SnackProduct,
        candidates: Sequence[SnackProduct],
        top_k: int = 5,
    ) -> list[SnackProduct]:
        """Products most similar to target, excluding target itself.

        Args:
            target: Product to compare against
            candidates: Pool to search (may contain target)
            top_k: Maximum number of results

        Returns:
            Up to top_k products, most similar first. Empty if target cannot
            be embedded or there are no candidates.
        """
        if not candidates:
            return []

        # The current model decides the dimension; fall back to a stored vector
        reference = await self.product_embedding(target)
        if reference is None:
            reference = target.embedding
        if reference is None:
            return []
        target.embedding = reference

        await self.ensure_embeddings(candidates, dimension=len(reference))
        ranked = rank_by_similarity(reference, candidates, top_k=top_k, exclude_id=target.id)
        return [product for product, _ in ranked]

    async def search(
        self,
        query: str,
        products: Sequence[SnackProduct],
        top_k: int = 10,
    ) -> list[SnackProduct]:
        """Products ranked by similarity to a free-text query.

        Returns:
            Up to top_k products, best match first. Empty for an empty query,
            an empty product list, or when the query cannot be embedded.
        """
        query_text = generate_query_embedding_text(query)
        if not query_text or not products:
            return []

        query_vector = await self.embed(query_text)
        if query_vector is None:
            return []

        await self.ensure_embeddings(products, dimension=len(query_vector))
        ranked = rank_by_similarity(query_vector, products, top_k=top_k)
        return [product for product, _ in ranked]
