"""Product Cache - TTL and size-capped cache of imagined products.

Products and embedding vectors are stored in a KeyValueStorePort under a
versioned namespace:

    {ns}:product:{id}       CachedProduct document
    {ns}:embedding:{text}   {"embedding": [...], "cached_at": ms}
    {ns}:products:all       index list of cached product ids (insertion order)

Entries expire after the TTL and are deleted lazily on lookup. Whenever the
index grows past ``max_entries`` the oldest entries (by cached_at) are
deleted and the index is rewritten; the same pass also sweeps expired
embeddings. Embeddings are keyed by arbitrary text (search queries
included), so they have their own cap, ``max_embeddings``, enforced on
write with a prefix scan of the store.

There is no locking: two writers doing put() at the same time each
read-modify-write the index list and the last write wins, so an id can drop
out of the index while its product entry survives until it expires.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from pydantic import ValidationError

from ...domain.shop import CachedProduct, CacheStats, SnackProduct
from ...domain.storage import KeyValueStorePort
from ...observability.metrics import cache_lookups_total, cache_evictions_total, cache_products

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "v1"
DEFAULT_TTL_SECONDS = 7 * 24 * 60 * 60
DEFAULT_MAX_ENTRIES = 500

Clock = Callable[[], int]


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


def _ms_to_datetime(ms: int) -> datetime:
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc)


class ProductCache:
    """Key-value backed cache of products and embeddings.

    Args:
        store: Backing key-value store
        namespace: Version prefix for every key; bump to orphan old entries
        ttl_seconds: Lifetime of an entry
        max_entries: Cap on the product index length
        max_embeddings: Cap on cached embedding vectors (default 4x max_entries)
        clock: Callable returning epoch milliseconds (injectable for tests)

    Example:
        cache = ProductCache(InMemoryKeyValueStore(), max_entries=2)
        cache.put(product)
        cache.get(product.id)  # -> SnackProduct equal to product
    """

    def __init__(
        self,
        store: KeyValueStorePort,
        namespace: str = DEFAULT_NAMESPACE,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Clock = now_ms,
        max_embeddings: Optional[int] = None,
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        if max_embeddings is not None and max_embeddings < 1:
            raise ValueError("max_embeddings must be at least 1")

        self.store = store
        self.namespace = namespace
        self.ttl_ms = ttl_seconds * 1000
        self.max_entries = max_entries
        self.max_embeddings = max_embeddings or max_entries * 4
        self._clock = clock

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def product_key(self, product_id: str) -> str:
        return f"{self.namespace}:product:{product_id}"

    def embedding_key(self, text: str) -> str:
        return f"{self.namespace}:embedding:{text}"

    def index_key(self) -> str:
        return f"{self.namespace}:products:all"

    def embedding_prefix(self) -> str:
        return f"{self.namespace}:embedding:"

    def _is_expired(self, cached_at: int) -> bool:
        return self._clock() - cached_at > self.ttl_ms

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def put(self, product: SnackProduct) -> CachedProduct:
        """Store or overwrite a product and enforce the size cap.

        Overwriting an id refreshes its cached_at but does not add a second
        index entry.

        Returns:
            The stored CachedProduct
        """
        cached = CachedProduct(**product.model_dump(exclude={"cached_at"}), cached_at=self._clock())
        self.store.set(self.product_key(product.id), cached.model_dump(mode="json"))

        ids = self.ids()
        if product.id not in ids:
            ids.append(product.id)
            self.store.set(self.index_key(), ids)

        self._enforce_max_size()
        return cached

    def get(self, product_id: str) -> Optional[SnackProduct]:
        """Return a cached product, or None if absent or expired.

        Expired entries are deleted as a side effect.
        """
        cached = self._load(product_id)
        if cached is None:
            cache_lookups_total.labels(kind="product", result="miss").inc()
            return None

        if self._is_expired(cached.cached_at):
            self.store.delete(self.product_key(product_id))
            cache_lookups_total.labels(kind="product", result="expired").inc()
            logger.debug("Cached product expired", extra={"product_id": product_id})
            return None

        cache_lookups_total.labels(kind="product", result="hit").inc()
        return cached.to_product()

    def ids(self) -> list[str]:
        """Return the index list of cached product ids (oldest insert first)."""
        ids = self.store.get(self.index_key())
        return list(ids) if ids else []

    def get_all(self) -> list[SnackProduct]:
        """Return every cached, unexpired product in index order."""
        products = []
        for product_id in self.ids():
            product = self.get(product_id)
            if product is not None:
                products.append(product)
        return products

    def clear(self) -> None:
        """Delete every indexed product, the index and all cached embeddings."""
        ids = self.ids()
        for product_id in ids:
            self.store.delete(self.product_key(product_id))
        self.store.delete(self.index_key())

        embedding_keys = self.store.keys(self.embedding_prefix())
        for key in embedding_keys:
            self.store.delete(key)

        cache_products.set(0)
        logger.info(f"Product cache cleared ({len(ids)} products, {len(embedding_keys)} embeddings)")

    def stats(self) -> CacheStats:
        """Summarize the cache: index size and oldest/newest cache times."""
        ids = self.ids()
        cache_times = [
            cached.cached_at
            for cached in (self._load(product_id) for product_id in ids)
            if cached is not None
        ]

        if not cache_times:
            return CacheStats(product_count=len(ids))

        return CacheStats(
            product_count=len(ids),
            oldest_cache_date=_ms_to_datetime(min(cache_times)),
            newest_cache_date=_ms_to_datetime(max(cache_times)),
        )

    def _load(self, product_id: str) -> Optional[CachedProduct]:
        raw = self.store.get(self.product_key(product_id))
        if raw is None:
            return None
        try:
            return CachedProduct.model_validate(raw)
        except ValidationError as e:
            logger.warning(
                f"Dropping unreadable cache entry: {e}",
                extra={"product_id": product_id}
            )
            self.store.delete(self.product_key(product_id))
            return None

    def _enforce_max_size(self) -> None:
        """Evict the oldest entries until the index fits the cap."""
        ids = self.ids()
        cache_products.set(len(ids))

        if len(ids) <= self.max_entries:
            return

        # Entries missing from the store sort first (cached_at 0)
        by_age = []
        for product_id in ids:
            raw = self.store.get(self.product_key(product_id))
            cached_at = raw.get("cached_at", 0) if isinstance(raw, dict) else 0
            by_age.append((cached_at, product_id))
        by_age.sort(key=lambda item: item[0])

        to_remove = {product_id for _, product_id in by_age[:len(ids) - self.max_entries]}
        for product_id in to_remove:
            self.store.delete(self.product_key(product_id))

        remaining = [product_id for product_id in ids if product_id not in to_remove]
        self.store.set(self.index_key(), remaining)

        cache_evictions_total.inc(len(to_remove))
        cache_products.set(len(remaining))
        logger.info("Evicted oldest cached products", extra={"evicted": len(to_remove)})

        self._prune_embeddings()

    # ------------------------------------------------------------------
    # Embeddings
    # ------------------------------------------------------------------

    def put_embedding(self, text: str, embedding: list[float]) -> None:
        """Cache an embedding vector under the text it was derived from.

        Writing past ``max_embeddings`` drops expired vectors first, then the
        oldest ones.
        """
        self.store.set(
            self.embedding_key(text),
            {"embedding": list(embedding), "cached_at": self._clock()},
        )
        if len(self.store.keys(self.embedding_prefix())) > self.max_embeddings:
            self._prune_embeddings(limit=self.max_embeddings)

    def get_embedding(self, text: str) -> Optional[list[float]]:
        """Return a cached embedding, or None if absent or expired."""
        raw: Any = self.store.get(self.embedding_key(text))
        if not isinstance(raw, dict) or "embedding" not in raw:
            cache_lookups_total.labels(kind="embedding", result="miss").inc()
            return None

        if self._is_expired(raw.get("cached_at", 0)):
            self.store.delete(self.embedding_key(text))
            cache_lookups_total.labels(kind="embedding", result="expired").inc()
            return None

        cache_lookups_total.labels(kind="embedding", result="hit").inc()
        return list(raw["embedding"])

    def _prune_embeddings(self, limit: Optional[int] = None) -> int:
        """Delete expired or unreadable embeddings, then the oldest past limit.

        Returns:
            Number of embeddings deleted
        """
        removed = []
        live = []
        for key in self.store.keys(self.embedding_prefix()):
            raw = self.store.get(key)
            if not isinstance(raw, dict) or self._is_expired(raw.get("cached_at", 0)):
                removed.append(key)
            else:
                live.append((raw["cached_at"], key))

        if limit is not None and len(live) > limit:
            live.sort(key=lambda item: item[0])
            removed.extend(key for _, key in live[:len(live) - limit])

        for key in removed:
            self.store.delete(key)

        if removed:
            logger.info("Pruned cached embeddings", extra={"evicted": len(removed)})
        return len(removed)
