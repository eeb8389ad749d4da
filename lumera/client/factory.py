"""Wiring for a ready-to-use wishlist client session"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

from .auth import AuthState
from .config import ClientSettings, get_client_settings
from .local_store import LocalStorage, LocalStore
from .notifications import Notifier
from .reconciler import WishlistReconciler
from .remote_store import RemoteStore

@asynccontextmanager
async def wishlist_session(
    settings: Optional[ClientSettings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    notifier: Optional[Notifier] = None,
) -> AsyncIterator[WishlistReconciler]:
    """
    Open an HTTP client and yield a reconciler attached to its auth state.

    The reconciler starts in whatever state ``settings.ACCESS_TOKEN`` implies
    and follows later ``auth.login`` / ``auth.logout`` calls on its own.
    """
    settings = settings or get_client_settings()

    async with httpx.AsyncClient(
        base_url=settings.API_BASE_URL,
        timeout=settings.HTTP_TIMEOUT,
        transport=transport,
    ) as http:
        auth = AuthState(http, token=settings.ACCESS_TOKEN)
        storage = LocalStorage(settings.WISHLIST_STORAGE_PATH)
        reconciler = WishlistReconciler(
            local=LocalStore(storage, settings.WISHLIST_STORAGE_KEY),
            remote=RemoteStore(http, auth),
            auth=auth,
            notifier=notifier,
            retain_failed=settings.WISHLIST_RETAIN_FAILED_MERGE,
        ).attach()
        try:
            if auth.is_authenticated:
                await reconciler.refresh()
            yield reconciler
        finally:
            reconciler.detach()
