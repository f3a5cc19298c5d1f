"""Unit tests for EmbeddingService

Uses the bag-of-words FakeEmbedder from tests.fakes so texts that share words
end up close together.
"""

import pytest

from snackshop.domain.shop import Category
from snackshop.services.embedding import (
    EmbeddingService,
    generate_product_embedding_text,
    generate_query_embedding_text,
)
from tests.fakes import EMBEDDING_DIMENSION, FakeEmbedder, make_runtime


class TestEmbeddingText:
    """Test canonical embedding text"""

    def test_product_text_format(self, product_factory):
        product = product_factory(
            name="Cosmic Yuzu Crunch",
            description="Citrus chips.",
            category=Category.CHIPS,
            origin="Japan",
        )

        assert generate_product_embedding_text(product) == "Cosmic Yuzu Crunch Citrus chips. chips Japan"

    def test_query_text_collapses_whitespace(self):
        assert generate_query_embedding_text("  spicy \n  mango\tchips ") == "spicy mango chips"


class TestEmbed:
    """Test embed() caching and failure handling"""

    @pytest.mark.asyncio
    async def test_embed_caches_vector(self, embedding_service, embedder, cache):
        """Second call for the same text is served from cache"""
        first = await embedding_service.embed("chili mango")
        second = await embedding_service.embed("chili mango")

        assert first == second
        assert embedder.calls == ["chili mango"]
        assert cache.get_embedding("chili mango") == first

    @pytest.mark.asyncio
    async def test_embed_blank_text_returns_none(self, embedding_service, embedder):
        assert await embedding_service.embed("   ") is None
        assert embedder.calls == []

    @pytest.mark.asyncio
    async def test_embed_failure_returns_none(self, cache):
        """A failing model is logged, not raised"""
        service = EmbeddingService(make_runtime(embedder=FakeEmbedder(fail=True)), cache)

        assert await service.embed("chili mango") is None

    @pytest.mark.asyncio
    async def test_ensure_embeddings_fills_missing_only(self, embedding_service, embedder, product_factory):
        with_vector = product_factory("a", embedding=[1.0] * 32)
        without = product_factory("b")

        await embedding_service.ensure_embeddings([with_vector, without])

        assert with_vector.embedding == [1.0] * 32
        assert without.embedding is not None
        assert len(embedder.calls) == 1


class TestSimilarity:
    """Test find_similar() and search()"""

    @pytest.mark.asyncio
    async def test_find_similar_excludes_target(self, embedding_service, product_factory):
        """The target product is never returned as its own match"""
        target = product_factory("target", name="Chili Mango Chips", description="Spicy mango chips.")
        twin = product_factory("twin", name="Chili Mango Crisps", description="Spicy mango crisps.")
        other = product_factory(
            "other",
            name="Vanilla Cloud Cookie",
            description="Soft vanilla cookie.",
            category=Category.COOKIES,
            origin="France",
        )

        results = await embedding_service.find_similar(target, [target, other, twin], top_k=5)

        ids = [p.id for p in results]
        assert "target" not in ids
        assert ids[0] == "twin"

    @pytest.mark.asyncio
    async def test_find_similar_empty_candidates(self, embedding_service, product_factory):
        assert await embedding_service.find_similar(product_factory(), []) == []

    @pytest.mark.asyncio
    async def test_search_ranks_matching_products_first(self, embedding_service, product_factory):
        chocolate = product_factory(
            "choc",
            name="Midnight Cocoa Bar",
            description="Dark chocolate bar.",
            category=Category.CHOCOLATE,
            origin="Belgium",
        )
        chips = product_factory("chips", name="Salted Potato Chips", description="Crunchy potato chips.")

        results = await embedding_service.search("dark chocolate bar", [chips, chocolate], top_k=1)

        assert [p.id for p in results] == ["choc"]

    @pytest.mark.asyncio
    async def test_search_empty_query_or_products(self, embedding_service, product_factory):
        assert await embedding_service.search("   ", [product_factory()]) == []
        assert await embedding_service.search("chips", []) == []

    @pytest.mark.asyncio
    async def test_search_with_failing_model_returns_empty(self, cache, product_factory):
        """Without embeddings there is nothing to rank"""
        service = EmbeddingService(make_runtime(embedder=FakeEmbedder(fail=True)), cache)

        assert await service.search("chips", [product_factory()]) == []


class TestModelChange:
    """Test behaviour after the embedding model (and its dimension) changed"""

    @pytest.mark.asyncio
    async def test_search_reembeds_stale_vectors(self, embedding_service, product_factory):
        """One product with an old vector does not empty the results"""
        chocolate = product_factory(
            "choc",
            name="Midnight Cocoa Bar",
            description="Dark chocolate bar.",
            category=Category.CHOCOLATE,
            origin="Belgium",
        )
        stale = product_factory(
            "stale",
            name="Salted Potato Chips",
            description="Crunchy potato chips.",
            embedding=[1.0, 0.0, 0.0],
        )

        results = await embedding_service.search("dark chocolate bar", [chocolate, stale], top_k=5)

        assert [p.id for p in results][0] == "choc"
        assert {p.id for p in results} == {"choc", "stale"}
        assert len(stale.embedding) == EMBEDDING_DIMENSION

    @pytest.mark.asyncio
    async def test_find_similar_with_stale_target(self, embedding_service, product_factory):
        target = product_factory(
            "target",
            name="Chili Mango Chips",
            description="Spicy mango chips.",
            embedding=[1.0, 0.0, 0.0],
        )
        twin = product_factory("twin", name="Chili Mango Crisps", description="Spicy mango crisps.")

        results = await embedding_service.find_similar(target, [target, twin])

        assert [p.id for p in results] == ["twin"]
        assert len(target.embedding) == EMBEDDING_DIMENSION

    @pytest.mark.asyncio
    async def test_cached_vectors_are_keyed_by_model(self, runtime, cache, embedder):
        """A vector cached for one model is never served for another"""
        first = EmbeddingService(runtime, cache, model_name="model-a")
        second = EmbeddingService(runtime, cache, model_name="model-b")

        await first.embed("chili mango")
        await second.embed("chili mango")

        assert embedder.calls == ["chili mango", "chili mango"]
        assert cache.get_embedding("model-a|chili mango") is not None
        assert cache.get_embedding("chili mango") is None
