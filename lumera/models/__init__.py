"""Models package initialization"""

from .base import Base
from .user import User, UserRole
from .product import Product, Category
from .wishlist import WishlistItem

# Export all models
__all__ = [
    "Base",
    "User",
    "UserRole",
    "Category",
    "Product",
    "WishlistItem",
]
