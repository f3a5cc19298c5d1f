"""Application context and FastAPI dependencies.

This module provides:
- ShopContext: every long-lived service the API needs (store, cache, models,
  generator, shop state, preloader), built once at startup
- build_context: wires a ShopContext from Settings
- get_* dependencies: pull individual services off app.state for routes

Tests build their own ShopContext with fake model loaders and the in-memory
store, then assign it to app.state.shop.
"""

from dataclasses import dataclass

from fastapi import Request

from .config import Settings, get_settings
from .domain.storage import KeyValueStorePort
from .services.ai import ModelPreloader, ModelRuntime
from .services.cache import ProductCache
from .services.embedding import EmbeddingService
from .services.generation import ProductGenerator
from .shop.store import ShopStore


@dataclass
class ShopContext:
    """Long-lived services shared by all requests"""
    settings: Settings
    store: KeyValueStorePort
    cache: ProductCache
    runtime: ModelRuntime
    embeddings: EmbeddingService
    generator: ProductGenerator
    shop: ShopStore
    preloader: ModelPreloader


def build_store(settings: Settings) -> KeyValueStorePort:
    """Create the key-value store selected by KV_BACKEND.

    Raises:
        ValueError: If KV_BACKEND is not "sql" or "memory"
    """
    backend = settings.KV_BACKEND.lower()
    if backend == "memory":
        from .infrastructure.storage import InMemoryKeyValueStore
        return InMemoryKeyValueStore()
    if backend == "sql":
        from .database import SessionLocal
        from .infrastructure.storage import SqlKeyValueStore
        return SqlKeyValueStore(SessionLocal)
    raise ValueError(f"Unknown KV_BACKEND: {settings.KV_BACKEND}")


def build_context(
    settings: Settings,
    store: KeyValueStorePort = None,
    runtime: ModelRuntime = None,
) -> ShopContext:
    """Wire all services together.

    Args:
        settings: Application settings
        store: Key-value store (default: selected by KV_BACKEND)
        runtime: Model runtime (default: OpenAI-backed)

    Returns:
        ShopContext: Ready-to-use context
    """
    store = store if store is not None else build_store(settings)
    runtime = runtime if runtime is not None else ModelRuntime.from_settings(settings)

    cache = ProductCache(
        store,
        namespace=settings.CACHE_NAMESPACE,
        ttl_seconds=settings.CACHE_TTL_SECONDS,
        max_entries=settings.CACHE_MAX_ENTRIES,
        max_embeddings=settings.CACHE_MAX_EMBEDDINGS,
    )
    embeddings = EmbeddingService(runtime, cache, model_name=settings.EMBEDDING_MODEL)
    generator = ProductGenerator(
        runtime,
        cache,
        embeddings,
        batch_size=settings.GENERATION_BATCH_SIZE,
    )

    return ShopContext(
        settings=settings,
        store=store,
        cache=cache,
        runtime=runtime,
        embeddings=embeddings,
        generator=generator,
        shop=ShopStore(store, cache),
        preloader=ModelPreloader(runtime),
    )


def get_context(request: Request) -> ShopContext:
    """Return the ShopContext attached to the running app."""
    return request.app.state.shop


def get_app_settings(request: Request) -> Settings:
    context = getattr(request.app.state, "shop", None)
    return context.settings if context is not None else get_settings()


def get_cache(request: Request) -> ProductCache:
    return get_context(request).cache


def get_runtime(request: Request) -> ModelRuntime:
    return get_context(request).runtime


def get_embedding_service(request: Request) -> EmbeddingService:
    return get_context(request).embeddings


def get_generator(request: Request) -> ProductGenerator:
    return get_context(request).generator


def get_shop_store(request: Request) -> ShopStore:
    return get_context(request).shop


def get_preloader(request: Request) -> ModelPreloader:
    return get_context(request).preloader
