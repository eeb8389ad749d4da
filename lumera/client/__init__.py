"""Client-side wishlist reconciliation for the Lumera storefront"""

from .auth import AuthState
from .config import ClientSettings, get_client_settings
from .errors import WishlistError, WishlistRequestError
from .factory import wishlist_session
from .identity import Anonymous, Authenticated, Identity
from .local_store import LocalStorage, LocalStore
from .notifications import Notification, NotificationVariant, Notifier
from .query_cache import QueryCache
from .reconciler import MergeResult, WishlistReconciler, PRODUCT_IDS_KEY, WISHLIST_KEY
from .remote_store import RemoteStore

__all__ = [
    "AuthState",
    "ClientSettings",
    "get_client_settings",
    "WishlistError",
    "WishlistRequestError",
    "wishlist_session",
    "Anonymous",
    "Authenticated",
    "Identity",
    "LocalStorage",
    "LocalStore",
    "Notification",
    "NotificationVariant",
    "Notifier",
    "QueryCache",
    "MergeResult",
    "WishlistReconciler",
    "PRODUCT_IDS_KEY",
    "WISHLIST_KEY",
    "RemoteStore",
]
