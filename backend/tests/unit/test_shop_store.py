"""Unit tests for ShopStore (cart, stars, browsing state, persistence)"""

import pytest

from snackshop.shop.store import MAX_LINE_QUANTITY, STORAGE_KEY, ShopStore


@pytest.fixture
def shop(kv_store, cache) -> ShopStore:
    return ShopStore(kv_store, cache)


class TestCart:
    """Test cart operations"""

    def test_add_to_cart_merges_lines(self, shop, product_factory):
        product = product_factory("snack_1", price=2.5)

        shop.add_to_cart(product, 1)
        shop.add_to_cart(product, 2)

        assert len(shop.cart) == 1
        assert shop.cart[0].quantity == 3
        assert shop.cart_total() == pytest.approx(7.5)
        assert shop.cart_item_count() == 3

    def test_merged_quantity_is_capped(self, shop, product_factory):
        product = product_factory("snack_1")

        shop.add_to_cart(product, 60)
        shop.add_to_cart(product, 60)

        assert shop.cart[0].quantity == MAX_LINE_QUANTITY

    def test_total_across_lines(self, shop, product_factory):
        shop.add_to_cart(product_factory("a", price=1.25), 2)
        shop.add_to_cart(product_factory("b", price=4.0), 1)

        assert shop.cart_total() == pytest.approx(6.5)
        assert shop.cart_item_count() == 3

    def test_update_quantity(self, shop, product_factory):
        shop.add_to_cart(product_factory("a", price=2.0), 1)

        shop.update_cart_quantity("a", 5)

        assert shop.cart[0].quantity == 5
        assert shop.cart_total() == pytest.approx(10.0)

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_update_quantity_zero_or_less_removes(self, shop, product_factory, quantity):
        shop.add_to_cart(product_factory("a"), 1)

        shop.update_cart_quantity("a", quantity)

        assert shop.cart == []

    def test_update_unknown_line_is_noop(self, shop, product_factory):
        shop.add_to_cart(product_factory("a"), 1)

        shop.update_cart_quantity("missing", 4)

        assert [item.product.id for item in shop.cart] == ["a"]

    def test_remove_and_clear(self, shop, product_factory):
        shop.add_to_cart(product_factory("a"), 1)
        shop.add_to_cart(product_factory("b"), 1)

        shop.remove_from_cart("a")
        assert [item.product.id for item in shop.cart] == ["b"]

        shop.clear_cart()
        assert shop.cart == []
        assert shop.cart_total() == 0

    def test_empty_cart(self, shop):
        assert shop.cart_total() == 0
        assert shop.cart_item_count() == 0


class TestStars:
    """Test starring"""

    def test_toggle_star_flips_state(self, shop, product_factory, cache):
        product = product_factory("snack_1")
        cache.put(product)

        assert shop.toggle_star("snack_1") is True
        assert shop.is_starred("snack_1")
        assert shop.toggle_star("snack_1") is False
        assert not shop.is_starred("snack_1")

    def test_toggle_star_updates_featured_current_and_cache(self, shop, product_factory, cache):
        featured = product_factory("snack_1")
        cache.put(featured)
        shop.add_product(featured)
        shop.set_current_product(product_factory("snack_1"))

        shop.toggle_star("snack_1")

        assert shop.featured_products[0].starred is True
        assert shop.current_product.starred is True
        assert cache.get("snack_1").starred is True

    def test_starred_products_skip_uncached(self, shop, product_factory, cache):
        cache.put(product_factory("snack_1"))
        shop.toggle_star("snack_1")
        shop.toggle_star("snack_gone")

        assert [p.id for p in shop.starred_products()] == ["snack_1"]


class TestProducts:
    """Test featured/current product state"""

    def test_add_product_ignores_duplicates(self, shop, product_factory):
        shop.add_product(product_factory("a"))
        shop.add_product(product_factory("a", name="Other name"))

        assert len(shop.featured_products) == 1

    def test_find_product_prefers_session_state(self, shop, product_factory, cache):
        cache.put(product_factory("a", name="Cached"))
        shop.add_product(product_factory("a", name="Featured"))

        assert shop.find_product("a").name == "Featured"
        assert shop.find_product("missing") is None

    def test_find_product_falls_back_to_cache(self, shop, product_factory, cache):
        cache.put(product_factory("a"))

        assert shop.find_product("a").id == "a"

    def test_increment_view_count_counts_once_for_shared_object(self, shop, product_factory):
        product = product_factory("a")
        shop.add_product(product)
        shop.set_current_product(product)

        shop.increment_view_count("a")

        assert shop.current_product.view_count == 1
        assert shop.featured_products[0].view_count == 1

    def test_increment_view_count_updates_separate_copies(self, shop, product_factory):
        shop.add_product(product_factory("a"))
        shop.set_current_product(product_factory("a"))

        shop.increment_view_count("a")

        assert shop.featured_products[0].view_count == 1
        assert shop.current_product.view_count == 1


class TestPersistence:
    """Test that cart and stars survive a restart"""

    def test_cart_and_stars_restored(self, kv_store, cache, product_factory):
        shop = ShopStore(kv_store, cache)
        shop.add_to_cart(product_factory("a", price=3.0), 2)
        shop.toggle_star("a")
        shop.add_product(product_factory("b"))

        restored = ShopStore(kv_store, cache)

        assert restored.cart_item_count() == 2
        assert restored.cart_total() == pytest.approx(6.0)
        assert restored.starred_product_ids == ["a"]
        assert restored.featured_products == []

    def test_persisted_document_shape(self, kv_store, cache, product_factory):
        shop = ShopStore(kv_store, cache)
        shop.add_to_cart(product_factory("a"), 1)

        document = kv_store.get(STORAGE_KEY)

        assert set(document) == {"cart", "starred_product_ids"}
        assert document["cart"][0]["quantity"] == 1

    def test_unreadable_cart_discarded(self, kv_store, cache):
        kv_store.set(STORAGE_KEY, {"cart": [{"quantity": 1}], "starred_product_ids": ["x"]})

        shop = ShopStore(kv_store, cache)

        assert shop.cart == []
        assert shop.starred_product_ids == ["x"]
