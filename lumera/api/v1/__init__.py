"""API v1 routes aggregation"""

from fastapi import APIRouter

from .auth.router import router as auth_router
from .wishlist.router import router as wishlist_router

# Create v1 router
api_router = APIRouter()

# Include all routers
api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
api_router.include_router(wishlist_router, prefix="/wishlist", tags=["Wishlist"])
