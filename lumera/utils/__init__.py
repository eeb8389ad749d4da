"""Utilities package"""

from .pagination import paginate, page_count, PaginationParams

__all__ = [
    "paginate",
    "page_count",
    "PaginationParams",
]
