"""
Wishlist service layer
Server-authoritative wishlist storage for authenticated users
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, delete, and_, or_
from sqlalchemy.orm import selectinload
import logging

from lumera.models import WishlistItem, Product
from lumera.core.cache import cache
from lumera.core.config import settings
from lumera.core.exceptions import BadRequestException, ProductNotFoundException
from lumera.utils.pagination import PaginationParams, paginate

logger = logging.getLogger(__name__)

def product_ids_cache_key(user_id: str) -> str:
    return f"wishlist:ids:{user_id}"

class WishlistService:
    """Wishlist service"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_items(
        self,
        user_id: str,
        params: PaginationParams,
        search: Optional[str] = None
    ) -> dict:
        """
        Get a page of wishlist entries with their products

        Args:
            user_id: Owner of the wishlist
            params: Page number and size
            search: Case-insensitive match on product name or description

        Returns:
            Page dictionary (items, total, page, limit, pages)
        """
        query = (
            select(WishlistItem)
            .join(Product, WishlistItem.product_id == Product.id)
            .where(WishlistItem.user_id == user_id)
            .order_by(WishlistItem.created_at.desc(), WishlistItem.id)
        )

        if search and search.strip():
            term = f"%{search.strip()}%"
            query = query.where(
                or_(Product.name.ilike(term), Product.description.ilike(term))
            )

        return await paginate(
            self.db,
            query,
            params,
            options=(selectinload(WishlistItem.product).selectinload(Product.category),)
        )

    async def _find(self, user_id: str, product_id: str) -> Optional[WishlistItem]:
        result = await self.db.execute(
            select(WishlistItem).where(
                and_(
                    WishlistItem.user_id == user_id,
                    WishlistItem.product_id == product_id
                )
            )
        )
        return result.scalar_one_or_none()

    async def add_item(self, user_id: str, product_id: Optional[str]) -> WishlistItem:
        """
        Add a product to the wishlist

        Adding a product that is already saved returns the existing entry.

        Raises:
            BadRequestException: If product_id is missing
            ProductNotFoundException: If the product does not exist
        """
        if not product_id or not product_id.strip():
            raise BadRequestException("Product ID is required", error_code="PRODUCT_ID_REQUIRED")

        product = await self.db.get(Product, product_id)
        if not product:
            raise ProductNotFoundException()

        existing = await self._find(user_id, product_id)
        if existing:
            return existing

        item = WishlistItem(user_id=user_id, product_id=product_id)
        self.db.add(item)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race against a concurrent add of the same product
            await self.db.rollback()
            existing = await self._find(user_id, product_id)
            if existing is None:
                raise
            return existing

        await self.db.refresh(item)
        await cache.delete(product_ids_cache_key(user_id))
        logger.info(f"Wishlist add user={user_id} product={product_id}")
        return item

    async def remove_item(self, user_id: str, product_id: str) -> None:
        """Remove a product from the wishlist; absent products are ignored"""
        result = await self.db.execute(
            delete(WishlistItem).where(
                and_(
                    WishlistItem.user_id == user_id,
                    WishlistItem.product_id == product_id
                )
            )
        )
        await self.db.commit()
        await cache.delete(product_ids_cache_key(user_id))
        if result.rowcount:
            logger.info(f"Wishlist remove user={user_id} product={product_id}")

    async def is_in_wishlist(self, user_id: str, product_id: str) -> bool:
        return await self._find(user_id, product_id) is not None

    async def get_product_ids(self, user_id: str) -> List[str]:
        """Product ids saved by the user, oldest first"""
        key = product_ids_cache_key(user_id)
        cached_ids = await cache.get(key)
        if cached_ids is not None:
            return cached_ids

        result = await self.db.execute(
            select(WishlistItem.product_id)
            .where(WishlistItem.user_id == user_id)
            .order_by(WishlistItem.created_at, WishlistItem.id)
        )
        product_ids = list(result.scalars().all())
        await cache.set(key, product_ids, settings.WISHLIST_IDS_CACHE_TTL)
        return product_ids
