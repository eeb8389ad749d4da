"""Wishlist router: server-side store for authenticated users"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from lumera.core.config import settings
from lumera.core.database import get_db
from lumera.api.v1.auth.dependencies import get_current_user
from lumera.models import User
from lumera.utils.pagination import PaginationParams
from .schemas import (
    WishlistItemCreate,
    WishlistItemResponse,
    WishlistPage,
    WishlistCheckResponse,
    WishlistRemoveResponse,
)
from .services import WishlistService

router = APIRouter()

@router.get("", response_model=WishlistPage)
async def get_wishlist(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.WISHLIST_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    search: Optional[str] = Query(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get wishlist entries with product details, newest first"""
    service = WishlistService(db)

    return await service.get_items(
        user_id=current_user.id,
        params=PaginationParams(page=page, limit=limit),
        search=search
    )

@router.post("", response_model=WishlistItemResponse)
async def add_to_wishlist(
    item_data: WishlistItemCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Add product to wishlist"""
    service = WishlistService(db)

    return await service.add_item(
        user_id=current_user.id,
        product_id=item_data.product_id
    )

@router.get("/product-ids", response_model=List[str])
async def get_wishlist_product_ids(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get ids of every product in the wishlist"""
    service = WishlistService(db)

    return await service.get_product_ids(current_user.id)

@router.get("/check/{product_id}", response_model=WishlistCheckResponse)
async def check_wishlist(
    product_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Check whether a product is in the wishlist"""
    service = WishlistService(db)

    in_wishlist = await service.is_in_wishlist(current_user.id, product_id)
    return WishlistCheckResponse(is_in_wishlist=in_wishlist)

@router.delete("/{product_id}", response_model=WishlistRemoveResponse)
async def remove_from_wishlist(
    product_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Remove product from wishlist"""
    service = WishlistService(db)

    await service.remove_item(current_user.id, product_id)

    return WishlistRemoveResponse(success=True)
