"""
Domain models for imagined snack products.

These are Pydantic models: they double as the JSON documents stored in the
key-value cache and as API response bodies.
"""
from datetime import datetime
from enum import Enum
from typing import Optional, List

from pydantic import BaseModel, Field


class Category(str, Enum):
    """Fixed set of snack categories"""
    CHIPS = "chips"
    CANDY = "candy"
    DRINKS = "drinks"
    CHOCOLATE = "chocolate"
    COOKIES = "cookies"
    INTERNATIONAL = "international"
    SAVORY = "savory"
    SPICY = "spicy"


class FlavorProfile(str, Enum):
    """Flavor descriptors attached to a product"""
    SWEET = "sweet"
    SAVORY = "savory"
    SPICY = "spicy"
    SOUR = "sour"
    UMAMI = "umami"
    TANGY = "tangy"


class NutritionFacts(BaseModel):
    """Per-serving nutrition (grams, sodium in mg)"""
    calories: int
    protein: int
    carbs: int
    fat: int
    sodium: int
    sugar: int


class SnackProduct(BaseModel):
    """An AI-imagined snack product.

    Created by the product generator and mutated in place by shop actions
    (starring, view counting). ``generated_at`` is epoch milliseconds.
    """
    id: str
    name: str
    description: str
    price: float
    emoji: str
    ingredients: List[str] = Field(default_factory=list)
    allergens: List[str] = Field(default_factory=list)
    category: Category
    origin: str
    flavor_profile: List[FlavorProfile] = Field(default_factory=list)
    nutrition_facts: NutritionFacts
    starred: bool = False
    embedding: Optional[List[float]] = None
    generated_at: int
    view_count: int = 0


class CachedProduct(SnackProduct):
    """A product as stored in the cache, stamped with its write time (epoch ms)"""
    cached_at: int

    def to_product(self) -> SnackProduct:
        return SnackProduct.model_validate(self.model_dump(exclude={"cached_at"}))


class GenerateProductParams(BaseModel):
    """Inputs steering product generation"""
    search_term: Optional[str] = None
    category: Optional[Category] = None
    include_embedding: bool = False


class ModelStatus(str, Enum):
    """Lifecycle of a lazily loaded model"""
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class ModelLoadingState(BaseModel):
    """Loading status of both models"""
    text_model: ModelStatus = ModelStatus.IDLE
    embedding_model: ModelStatus = ModelStatus.IDLE


class CartItem(BaseModel):
    """Product in the cart with its quantity"""
    product: SnackProduct
    quantity: int = Field(ge=1)

    @property
    def line_total(self) -> float:
        return self.product.price * self.quantity


class CacheStats(BaseModel):
    """Summary of the product cache"""
    product_count: int
    oldest_cache_date: Optional[datetime] = None
    newest_cache_date: Optional[datetime] = None
