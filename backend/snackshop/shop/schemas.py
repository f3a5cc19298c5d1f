"""Pydantic schemas for the shop API (generation, search, cart, models)"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List

from ..domain.shop import Category, ModelStatus, SnackProduct
from .store import MAX_LINE_QUANTITY


class GenerateProductsRequest(BaseModel):
    """Schema for generating new products"""
    count: int = Field(1, ge=1, description="Number of products to generate")
    search_term: Optional[str] = Field(None, max_length=200)
    category: Optional[Category] = None
    include_embedding: bool = False

    @field_validator('search_term')
    @classmethod
    def blank_search_term_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat a blank search term as absent"""
        if v is None or not v.strip():
            return None
        return v.strip()


class SearchRequest(BaseModel):
    """Schema for semantic product search"""
    query: str = Field(..., min_length=1, max_length=500)
    top_k: int = Field(10, ge=1, le=100)


class SearchResponse(BaseModel):
    """Schema for search results"""
    query: str
    results: List[SnackProduct]


class StarResponse(BaseModel):
    """Schema for a star toggle result"""
    product_id: str
    starred: bool


class CartItemCreate(BaseModel):
    """Schema for adding a product to the cart"""
    product_id: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1, le=MAX_LINE_QUANTITY)


class CartItemUpdate(BaseModel):
    """Schema for changing a cart line; zero or less removes it"""
    quantity: int = Field(..., le=MAX_LINE_QUANTITY)


class CartItemResponse(BaseModel):
    """Schema for a cart line"""
    product: SnackProduct
    quantity: int
    line_total: float


class CartResponse(BaseModel):
    """Schema for the whole cart"""
    items: List[CartItemResponse]
    total: float
    item_count: int


class ModelStatusResponse(BaseModel):
    """Schema for model loading status"""
    text_model: ModelStatus
    embedding_model: ModelStatus
    text_model_error: Optional[str] = None
    embedding_model_error: Optional[str] = None
