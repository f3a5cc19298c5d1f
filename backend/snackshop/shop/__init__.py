"""Shop module - cart, starred products and the shop HTTP API"""

from .store import ShopStore

__all__ = ["ShopStore"]
