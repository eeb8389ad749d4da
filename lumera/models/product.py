"""Catalog models referenced by wishlist entries"""

from sqlalchemy import Column, String, Text, Numeric, Integer, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from decimal import Decimal

from .base import Base, TimestampedModel, IDModel, ReprMixin

class Category(ReprMixin, Base, TimestampedModel, IDModel):
    """Product category (perfume, honey, gift sets...)"""

    __tablename__ = "categories"

    name = Column(String(100), nullable=False)
    slug = Column(String(120), unique=True, nullable=False, index=True)

    products = relationship("Product", back_populates="category")

class Product(ReprMixin, Base, TimestampedModel, IDModel):
    """Sellable product"""

    __tablename__ = "products"

    name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=False, default="")
    price = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    image_url = Column(String(500))
    stock = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    category_id = Column(String(64), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)

    category = relationship("Category", back_populates="products")
    wishlist_items = relationship(
        "WishlistItem",
        back_populates="product",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    @property
    def is_in_stock(self) -> bool:
        return self.stock > 0
