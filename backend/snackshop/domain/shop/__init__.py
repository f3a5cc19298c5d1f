"""Shop domain module - imagined snack products, cart and cache records"""

from .models import (
    Category,
    FlavorProfile,
    NutritionFacts,
    SnackProduct,
    CachedProduct,
    GenerateProductParams,
    ModelStatus,
    ModelLoadingState,
    CartItem,
    CacheStats,
)

__all__ = [
    "Category",
    "FlavorProfile",
    "NutritionFacts",
    "SnackProduct",
    "CachedProduct",
    "GenerateProductParams",
    "ModelStatus",
    "ModelLoadingState",
    "CartItem",
    "CacheStats",
]
