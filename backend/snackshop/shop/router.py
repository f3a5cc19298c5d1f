"""Shop API endpoints: generation, browsing, search, stars, cart, cache and models"""

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from typing import List
import logging

from ..config import Settings
from ..dependencies import (
    get_app_settings,
    get_cache,
    get_embedding_service,
    get_generator,
    get_preloader,
    get_runtime,
    get_shop_store,
)
from ..domain.shop import CacheStats, GenerateProductParams, SnackProduct
from ..services.ai import ModelPreloader, ModelRuntime
from ..services.cache import ProductCache
from ..services.embedding import EmbeddingService
from ..services.generation import ProductGenerator
from .schemas import (
    CartItemCreate,
    CartItemResponse,
    CartItemUpdate,
    CartResponse,
    GenerateProductsRequest,
    ModelStatusResponse,
    SearchRequest,
    SearchResponse,
    StarResponse,
)
from .store import ShopStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shop", tags=["shop"])


def _require_product(shop: ShopStore, product_id: str) -> SnackProduct:
    product = shop.find_product(product_id)
    if product is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product '{product_id}' not found"
        )
    return product


def _cart_response(shop: ShopStore) -> CartResponse:
    return CartResponse(
        items=[
            CartItemResponse(product=item.product, quantity=item.quantity, line_total=round(item.line_total, 2))
            for item in shop.cart
        ],
        total=round(shop.cart_total(), 2),
        item_count=shop.cart_item_count(),
    )


# ============================================================================
# Products
# ============================================================================

@router.post("/products/generate", response_model=List[SnackProduct], status_code=status.HTTP_201_CREATED)
async def generate_products(
    request: GenerateProductsRequest,
    generator: ProductGenerator = Depends(get_generator),
    shop: ShopStore = Depends(get_shop_store),
    settings: Settings = Depends(get_app_settings),
):
    """
    Imagine new snack products.

    Args:
        request: Count, optional search term / category, embedding flag

    Returns:
        The generated products (also cached and added to the featured list)

    Raises:
        HTTPException 400: If count exceeds GENERATION_MAX_COUNT
    """
    if request.count > settings.GENERATION_MAX_COUNT:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"count must not exceed {settings.GENERATION_MAX_COUNT}"
        )

    params = GenerateProductParams(
        search_term=request.search_term,
        category=request.category,
        include_embedding=request.include_embedding,
    )
    products = await generator.generate_products(request.count, params)
    for product in products:
        shop.add_product(product)

    logger.info(f"Generated {len(products)} products")
    return products


@router.get("/products", response_model=List[SnackProduct])
async def list_products(
    limit: int = Query(50, ge=1, le=500, description="Maximum number of products"),
    cache: ProductCache = Depends(get_cache),
):
    """
    List cached products, oldest first.

    Args:
        limit: Maximum number of products

    Returns:
        Cached, unexpired products
    """
    return cache.get_all()[:limit]


@router.get("/products/{product_id}", response_model=SnackProduct)
async def get_product(
    product_id: str,
    shop: ShopStore = Depends(get_shop_store),
):
    """
    Open a product: makes it the current product and counts the view.

    Raises:
        HTTPException 404: If the product is unknown or expired
    """
    product = _require_product(shop, product_id)
    shop.set_current_product(product)
    shop.increment_view_count(product_id)
    return shop.current_product


@router.get("/products/{product_id}/similar", response_model=List[SnackProduct])
async def similar_products(
    product_id: str,
    top_k: int = Query(5, ge=1, le=50),
    shop: ShopStore = Depends(get_shop_store),
    cache: ProductCache = Depends(get_cache),
    embeddings: EmbeddingService = Depends(get_embedding_service),
):
    """
    Products most similar to the given one.

    Returns an empty list when embeddings are unavailable.

    Raises:
        HTTPException 404: If the product is unknown or expired
    """
    target = _require_product(shop, product_id)
    return await embeddings.find_similar(target, cache.get_all(), top_k=top_k)


@router.post("/search", response_model=SearchResponse)
async def search_products(
    request: SearchRequest,
    shop: ShopStore = Depends(get_shop_store),
    cache: ProductCache = Depends(get_cache),
    embeddings: EmbeddingService = Depends(get_embedding_service),
):
    """
    Semantic search over cached products.

    Args:
        request: Free-text query and result limit

    Returns:
        Matching products, best first
    """
    results = await embeddings.search(request.query, cache.get_all(), top_k=request.top_k)
    shop.set_search_results(results)
    return SearchResponse(query=request.query, results=results)


# ============================================================================
# Starred products
# ============================================================================

@router.post("/products/{product_id}/star", response_model=StarResponse)
async def toggle_star(
    product_id: str,
    shop: ShopStore = Depends(get_shop_store),
):
    """
    Star or unstar a product.

    Raises:
        HTTPException 404: If the product is unknown and not starred
    """
    if not shop.is_starred(product_id):
        _require_product(shop, product_id)
    starred = shop.toggle_star(product_id)
    return StarResponse(product_id=product_id, starred=starred)


@router.get("/starred", response_model=List[SnackProduct])
async def list_starred(shop: ShopStore = Depends(get_shop_store)):
    """Starred products that are still cached."""
    return shop.starred_products()


# ============================================================================
# Cart
# ============================================================================

@router.get("/cart", response_model=CartResponse)
async def get_cart(shop: ShopStore = Depends(get_shop_store)):
    """Current cart with total and item count."""
    return _cart_response(shop)


@router.post("/cart/items", response_model=CartResponse, status_code=status.HTTP_201_CREATED)
async def add_cart_item(
    item: CartItemCreate,
    shop: ShopStore = Depends(get_shop_store),
):
    """
    Add a product to the cart, merging with an existing line.

    Raises:
        HTTPException 404: If the product is unknown or expired
    """
    product = _require_product(shop, item.product_id)
    shop.add_to_cart(product, item.quantity)
    return _cart_response(shop)


@router.patch("/cart/items/{product_id}", response_model=CartResponse)
async def update_cart_item(
    product_id: str,
    update: CartItemUpdate,
    shop: ShopStore = Depends(get_shop_store),
):
    """
    Change the quantity of a cart line. Zero or less removes the line.

    Raises:
        HTTPException 404: If the product is not in the cart
    """
    if not shop.in_cart(product_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product '{product_id}' is not in the cart"
        )
    shop.update_cart_quantity(product_id, update.quantity)
    return _cart_response(shop)


@router.delete("/cart/items/{product_id}", response_model=CartResponse)
async def remove_cart_item(
    product_id: str,
    shop: ShopStore = Depends(get_shop_store),
):
    """Remove a cart line (no-op if absent)."""
    shop.remove_from_cart(product_id)
    return _cart_response(shop)


@router.delete("/cart", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cart(shop: ShopStore = Depends(get_shop_store)):
    """Empty the cart."""
    shop.clear_cart()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============================================================================
# Cache & models
# ============================================================================

@router.get("/cache/stats", response_model=CacheStats)
async def cache_stats(cache: ProductCache = Depends(get_cache)):
    """Number of cached products and oldest/newest cache dates."""
    return cache.stats()


@router.delete("/cache", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cache(cache: ProductCache = Depends(get_cache)):
    """Delete every cached product (embeddings are kept)."""
    cache.clear()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _model_status(runtime: ModelRuntime) -> ModelStatusResponse:
    state = runtime.loading_state()
    return ModelStatusResponse(
        text_model=state.text_model,
        embedding_model=state.embedding_model,
        text_model_error=runtime.text_model.last_error,
        embedding_model_error=runtime.embedding_model.last_error,
    )


@router.get("/models/status", response_model=ModelStatusResponse)
async def model_status(runtime: ModelRuntime = Depends(get_runtime)):
    """Loading state of the text-generation and embedding models."""
    return _model_status(runtime)


@router.post("/models/preload", response_model=ModelStatusResponse, status_code=status.HTTP_202_ACCEPTED)
async def preload_models(
    runtime: ModelRuntime = Depends(get_runtime),
    preloader: ModelPreloader = Depends(get_preloader),
):
    """
    Start loading both models in the background.

    Returns immediately with the current state; poll /models/status.
    """
    preloader.start()
    return _model_status(runtime)
