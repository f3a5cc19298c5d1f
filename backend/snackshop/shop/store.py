"""Shop state: featured products, current product, cart and starred ids.

One logical shop per process. Only the cart and the starred ids are
persisted (as one document under ``shop-storage``); featured products,
search results and the current product are session state and start empty.
"""

import logging
from typing import Optional

from pydantic import ValidationError

from ..domain.shop import CartItem, SnackProduct
from ..domain.storage import KeyValueStorePort, KeyValueStoreError
from ..services.cache import ProductCache

logger = logging.getLogger(__name__)

STORAGE_KEY = "shop-storage"
MAX_LINE_QUANTITY = 99


class ShopStore:
    """Cart, starring and browsing state backed by a key-value store.

    Args:
        store: Key-value store holding the persisted document
        cache: Product cache used to resolve starred ids
        storage_key: Key of the persisted document
    """

    def __init__(self, store: KeyValueStorePort, cache: ProductCache, storage_key: str = STORAGE_KEY):
        self.store = store
        self.cache = cache
        self.storage_key = storage_key

        self.featured_products: list[SnackProduct] = []
        self.search_results: list[SnackProduct] = []
        self.current_product: Optional[SnackProduct] = None
        self.cart: list[CartItem] = []
        self.starred_product_ids: list[str] = []

        self._restore()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _restore(self) -> None:
        try:
            raw = self.store.get(self.storage_key)
        except KeyValueStoreError as e:
            logger.warning(f"Could not restore shop state: {e}")
            return

        if not isinstance(raw, dict):
            return

        try:
            self.cart = [CartItem.model_validate(item) for item in raw.get("cart", [])]
        except ValidationError as e:
            logger.warning(f"Discarding unreadable persisted cart: {e}")
            self.cart = []
        self.starred_product_ids = [str(pid) for pid in raw.get("starred_product_ids", [])]

    def _persist(self) -> None:
        self.store.set(
            self.storage_key,
            {
                "cart": [item.model_dump(mode="json") for item in self.cart],
                "starred_product_ids": list(self.starred_product_ids),
            },
        )

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def set_featured_products(self, products: list[SnackProduct]) -> None:
        self.featured_products = list(products)

    def set_search_results(self, products: list[SnackProduct]) -> None:
        self.search_results = list(products)

    def set_current_product(self, product: Optional[SnackProduct]) -> None:
        self.current_product = product

    def add_product(self, product: SnackProduct) -> None:
        """Append to the featured list unless a product with that id is already there."""
        if not any(p.id == product.id for p in self.featured_products):
            self.featured_products.append(product)

    def find_product(self, product_id: str) -> Optional[SnackProduct]:
        """Look a product up in session state first, then in the cache."""
        if self.current_product is not None and self.current_product.id == product_id:
            return self.current_product
        for product in self.featured_products:
            if product.id == product_id:
                return product
        return self.cache.get(product_id)

    def increment_view_count(self, product_id: str) -> None:
        """Bump view_count on the featured and current copies of a product."""
        for product in self.featured_products:
            if product.id == product_id:
                product.view_count += 1
        current = self.current_product
        if current is not None and current.id == product_id and not any(
            p is current for p in self.featured_products
        ):
            current.view_count += 1

    # ------------------------------------------------------------------
    # Cart
    # ------------------------------------------------------------------

    def _cart_item(self, product_id: str) -> Optional[CartItem]:
        for item in self.cart:
            if item.product.id == product_id:
                return item
        return None

    def add_to_cart(self, product: SnackProduct, quantity: int = 1) -> CartItem:
        """Add quantity of product, merging with an existing line.

        A merged line is capped at MAX_LINE_QUANTITY.
        """
        item = self._cart_item(product.id)
        if item is not None:
            item.quantity = min(item.quantity + quantity, MAX_LINE_QUANTITY)
        else:
            item = CartItem(product=product, quantity=min(quantity, MAX_LINE_QUANTITY))
            self.cart.append(item)
        self._persist()
        return item

    def remove_from_cart(self, product_id: str) -> None:
        self.cart = [item for item in self.cart if item.product.id != product_id]
        self._persist()

    def update_cart_quantity(self, product_id: str, quantity: int) -> None:
        """Set a line's quantity; zero or less removes the line."""
        if quantity <= 0:
            self.remove_from_cart(product_id)
            return

        item = self._cart_item(product_id)
        if item is not None:
            item.quantity = min(quantity, MAX_LINE_QUANTITY)
            self._persist()

    def clear_cart(self) -> None:
        self.cart = []
        self._persist()

    def in_cart(self, product_id: str) -> bool:
        return self._cart_item(product_id) is not None

    def cart_total(self) -> float:
        return sum(item.line_total for item in self.cart)

    def cart_item_count(self) -> int:
        return sum(item.quantity for item in self.cart)

    # ------------------------------------------------------------------
    # Starred products
    # ------------------------------------------------------------------

    def is_starred(self, product_id: str) -> bool:
        return product_id in self.starred_product_ids

    def toggle_star(self, product_id: str) -> bool:
        """Flip the starred state of a product.

        Updates the starred id list, the featured and current copies, and
        the cached record if there is one.

        Returns:
            The new starred state
        """
        starred = not self.is_starred(product_id)
        if starred:
            self.starred_product_ids.append(product_id)
        else:
            self.starred_product_ids = [pid for pid in self.starred_product_ids if pid != product_id]

        for product in self.featured_products:
            if product.id == product_id:
                product.starred = starred
        if self.current_product is not None and self.current_product.id == product_id:
            self.current_product.starred = starred

        try:
            cached = self.cache.get(product_id)
            if cached is not None:
                cached.starred = starred
                self.cache.put(cached)
        except KeyValueStoreError as e:
            logger.warning(f"Could not update starred flag in cache: {e}", extra={"product_id": product_id})

        self._persist()
        return starred

    def starred_products(self) -> list[SnackProduct]:
        """Resolve starred ids through the cache; ids no longer cached are skipped."""
        products = []
        for product_id in self.starred_product_ids:
            product = self.cache.get(product_id)
            if product is not None:
                products.append(product)
        return products
