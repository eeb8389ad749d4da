"""
Pagination utilities
"""

from typing import Sequence
from pydantic import BaseModel, Field
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from lumera.core.config import settings

class PaginationParams(BaseModel):
    """Pagination parameters"""
    page: int = Field(1, ge=1, description="Page number")
    limit: int = Field(
        settings.WISHLIST_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Page size"
    )

    @property
    def offset(self) -> int:
        """Calculate offset"""
        return (self.page - 1) * self.limit

def page_count(total: int, limit: int) -> int:
    return (total + limit - 1) // limit

async def paginate(
    db: AsyncSession,
    query: Select,
    params: PaginationParams,
    options: Sequence = ()
) -> dict:
    """
    Paginate query results

    Args:
        db: Database session
        query: SQLAlchemy query
        params: Page number and size
        options: Loader options applied to the page query only

    Returns:
        Dictionary with pagination data
    """
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = await db.scalar(count_query) or 0

    page_query = query.options(*options) if options else query
    result = await db.execute(page_query.offset(params.offset).limit(params.limit))
    items = result.scalars().all()

    return {
        "items": items,
        "total": total,
        "page": params.page,
        "limit": params.limit,
        "pages": page_count(total, params.limit)
    }
