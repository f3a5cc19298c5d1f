"""Pytest fixtures for SnackShop tests.

Provides reusable test fixtures for:
- In-memory key-value store and a controllable clock
- Fake text-generation and embedding models (no network)
- Product cache, model runtime, embedding service and generator
- A FastAPI TestClient wired to a ShopContext built from the fakes

Usage:
    def test_cart(client, cached_products):
        response = client.post("/api/v1/shop/cart/items", json={...})
        assert response.status_code == 201
"""

import os

# Set environment variables BEFORE any imports to ensure they take effect
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("KV_BACKEND", "memory")
os.environ.setdefault("PRELOAD_MODELS", "false")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("OPENAI_API_KEY", "")

import random
from typing import Callable, Generator

import pytest
from fastapi.testclient import TestClient

from snackshop.config import Settings
from snackshop.dependencies import ShopContext, build_context
from snackshop.domain.shop import Category, SnackProduct
from snackshop.infrastructure.storage import InMemoryKeyValueStore
from snackshop.services.ai import ModelRuntime
from snackshop.services.cache import ProductCache
from snackshop.services.embedding import EmbeddingService
from snackshop.services.generation import ProductGenerator
from tests.fakes import FakeClock, FakeEmbedder, FakeTextGenerator, make_product, make_runtime


# ============================================================================
# Service fixtures
# ============================================================================

@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def kv_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def cache(kv_store, clock) -> ProductCache:
    return ProductCache(kv_store, namespace="v1", ttl_seconds=60, max_entries=5, clock=clock)


@pytest.fixture
def text_model() -> FakeTextGenerator:
    return FakeTextGenerator()


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def runtime(text_model, embedder) -> ModelRuntime:
    return make_runtime(text_model, embedder)


@pytest.fixture
def embedding_service(runtime, cache) -> EmbeddingService:
    return EmbeddingService(runtime, cache)


@pytest.fixture
def generator(runtime, cache, embedding_service, clock) -> ProductGenerator:
    return ProductGenerator(
        runtime,
        cache,
        embedding_service,
        batch_size=3,
        rng=random.Random(42),
        clock=clock,
    )


@pytest.fixture
def product_factory() -> Callable[..., SnackProduct]:
    return make_product


# ============================================================================
# API fixtures
# ============================================================================

@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        KV_BACKEND="memory",
        PRELOAD_MODELS=False,
        CACHE_MAX_ENTRIES=50,
        GENERATION_MAX_COUNT=6,
    )


@pytest.fixture
def context(test_settings, kv_store, runtime) -> ShopContext:
    return build_context(test_settings, store=kv_store, runtime=runtime)


@pytest.fixture
def client(context) -> Generator[TestClient, None, None]:
    """TestClient for the app with the fake-backed ShopContext installed"""
    from snackshop.main import app

    app.state.shop = context
    with TestClient(app) as test_client:
        yield test_client
    del app.state.shop


@pytest.fixture
def cached_products(context) -> list[SnackProduct]:
    """Three products already in the shop's cache"""
    products = [
        make_product("snack_1", name="Cosmic Yuzu Crunch", description="Citrus chips with sea salt."),
        make_product(
            "snack_2",
            name="Volcano Chili Puffs",
            description="Fiery chili puffs with smoked paprika.",
            category=Category.SPICY,
            origin="Mexico",
            price=3.5,
        ),
        make_product(
            "snack_3",
            name="Midnight Cocoa Bar",
            description="Dark chocolate with sea salt crystals.",
            category=Category.CHOCOLATE,
            origin="Belgium",
            price=6.25,
        ),
    ]
    for product in products:
        context.cache.put(product)
    return products
