"""
Wishlist schemas for request/response validation
Field names are camelCase on the wire to match the storefront frontend
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import datetime
from decimal import Decimal

class CamelModel(BaseModel):
    """Base schema serialising to camelCase"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

class WishlistItemCreate(CamelModel):
    """Schema for adding a product to the wishlist"""
    product_id: Optional[str] = None

class CategorySummary(CamelModel):
    id: str
    name: str
    slug: str

class ProductSummary(CamelModel):
    """Product details embedded in wishlist listings"""
    id: str
    name: str
    description: str
    price: Decimal
    image_url: Optional[str] = None
    stock: int
    is_in_stock: bool
    category: Optional[CategorySummary] = None

class WishlistItemResponse(CamelModel):
    """Single wishlist entry"""
    id: str
    user_id: str
    product_id: str
    created_at: datetime

class WishlistItemWithProduct(WishlistItemResponse):
    product: ProductSummary

class WishlistPage(CamelModel):
    """Paginated wishlist listing"""
    items: List[WishlistItemWithProduct]
    total: int
    page: int
    limit: int
    pages: int

class WishlistCheckResponse(CamelModel):
    is_in_wishlist: bool

class WishlistRemoveResponse(CamelModel):
    success: bool = True
