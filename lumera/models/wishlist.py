"""
Wishlist model for saved products
"""

from sqlalchemy import Column, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import Base, TimestampedModel, IDModel, ReprMixin

class WishlistItem(ReprMixin, Base, TimestampedModel, IDModel):
    """User wishlist items"""

    __tablename__ = "wishlist_items"

    user_id = Column(String(64), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(String(64), ForeignKey("products.id", ondelete="CASCADE"), nullable=False)

    # Relationships
    user = relationship("User", back_populates="wishlist_items")
    product = relationship("Product", back_populates="wishlist_items")

    # One entry per (user, product): the wishlist is a set
    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_user_product_wishlist"),
        Index("idx_wishlist_user", "user_id"),
    )
