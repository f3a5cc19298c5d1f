"""Product cache service"""

from .product_cache import ProductCache, now_ms

__all__ = ["ProductCache", "now_ms"]
