"""Lumera storefront wishlist service"""

__version__ = "1.0.0"
