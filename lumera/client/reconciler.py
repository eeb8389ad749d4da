"""
Wishlist reconciliation

Keeps the storefront's wishlist view pointed at the authoritative store and
performs the one-time merge of the anonymous wishlist into the server
wishlist when a session signs in.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional
import asyncio
import logging

from .auth import AuthState
from .errors import DEFAULT_ERROR_MESSAGE, WishlistRequestError
from .identity import Anonymous, Authenticated, Identity
from .local_store import LocalStore
from .notifications import Notifier, NotificationVariant
from .query_cache import QueryCache
from .remote_store import RemoteStore

logger = logging.getLogger(__name__)

WISHLIST_KEY = ("wishlist",)
PRODUCT_IDS_KEY = ("wishlist", "product-ids")

@dataclass
class MergeResult:
    """Outcome of merging the anonymous wishlist into the server wishlist"""
    succeeded: List[str] = field(default_factory=list)
    failed: Dict[str, BaseException] = field(default_factory=dict)
    # Failed ids kept on the device for the next sign-in
    retained: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)

    @property
    def ok(self) -> bool:
        return not self.failed

def is_transient(error: BaseException) -> bool:
    """
    Whether a failed add is worth retrying on a later sign-in.

    Transport failures, timeouts, throttling and 5xx responses are; any other
    4xx (unknown product, bad request) will fail the same way again.
    """
    if not isinstance(error, WishlistRequestError):
        return True
    status_code = error.status_code
    return status_code is None or status_code >= 500 or status_code in (408, 429)

class WishlistReconciler:
    """
    Wishlist state for one storefront session.

    While anonymous every toggle goes to the local store and is persisted
    immediately. While authenticated toggles go to the server and the
    displayed ids are whatever the last successful fetch returned; nothing is
    mutated optimistically.

    ``sync_auth_state`` is the evaluation point: call it (or ``attach`` the
    reconciler to the ``AuthState``) whenever the auth state may have changed.
    The merge runs only on an anonymous to authenticated transition, never on
    repeated evaluations.
    """

    def __init__(
        self,
        local: LocalStore,
        remote: RemoteStore,
        auth: AuthState,
        notifier: Optional[Notifier] = None,
        cache: Optional[QueryCache] = None,
        retain_failed: bool = True,
    ):
        self.local = local
        self.remote = remote
        self.auth = auth
        self.notifier = notifier or Notifier()
        self.cache = cache or QueryCache()
        self.retain_failed = retain_failed

        self._was_authenticated = auth.is_authenticated
        self._session_token = auth.token
        self._identity = self._identity_for(self._was_authenticated)
        self._pending = 0
        self._unsubscribe: Optional[Callable[[], None]] = None

    def _identity_for(self, authenticated: bool) -> Identity:
        return Authenticated(self.remote) if authenticated else Anonymous(self.local)

    @property
    def identity(self) -> Identity:
        return self._identity

    @property
    def wishlist_product_ids(self) -> List[str]:
        if isinstance(self._identity, Anonymous):
            return self._identity.local.ids
        return list(self.cache.get(PRODUCT_IDS_KEY) or [])

    @property
    def is_loading(self) -> bool:
        return self._pending > 0

    def is_in_wishlist(self, product_id: str) -> bool:
        return product_id in self.wishlist_product_ids

    @contextmanager
    def _in_flight(self):
        self._pending += 1
        try:
            yield
        finally:
            self._pending -= 1

    def attach(self) -> "WishlistReconciler":
        """Re-evaluate automatically on every auth state change"""
        if self._unsubscribe is None:
            self._unsubscribe = self.auth.subscribe(self._on_auth_change)
        return self

    def detach(self):
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def _on_auth_change(self, authenticated: bool):
        await self.sync_auth_state()

    async def refresh(self) -> List[str]:
        """Refetch the server ids if their cached view is stale"""
        if isinstance(self._identity, Authenticated):
            try:
                await self.cache.fetch(PRODUCT_IDS_KEY, self._identity.remote.list_product_ids)
            except WishlistRequestError as e:
                logger.warning(f"Could not refresh wishlist: {e.message}")
        return self.wishlist_product_ids

    async def _invalidate_remote_views(self):
        self.cache.invalidate(WISHLIST_KEY)
        await self.refresh()

    async def sync_auth_state(self) -> Optional[MergeResult]:
        """
        Swap the authoritative store to match the auth state.

        Returns the merge result on an anonymous to authenticated transition,
        otherwise None.
        """
        authenticated = self.auth.is_authenticated
        token = self.auth.token
        was_authenticated = self._was_authenticated
        previous_token = self._session_token
        # Recorded before any await so overlapping evaluations see the transition as done
        self._was_authenticated = authenticated
        self._session_token = token

        if authenticated == was_authenticated:
            if authenticated and token != previous_token:
                # Another account (or a reissued token): server views belong to the old one
                logger.info("Wishlist session token changed, refetching server wishlist")
                self.cache.remove(WISHLIST_KEY)
                await self.refresh()
            return None

        self._identity = self._identity_for(authenticated)

        if not authenticated:
            self.cache.remove(WISHLIST_KEY)
            logger.info("Wishlist switched to local storage")
            return None

        logger.info("Wishlist switched to server storage")
        result = await self.merge_local_into_remote()
        if result.total == 0:
            await self.refresh()
        return result

    async def _merge_one(self, remote: RemoteStore, product_id: str):
        with self._in_flight():
            await remote.add(product_id)

    async def merge_local_into_remote(self) -> MergeResult:
        """
        Union the anonymous wishlist into the server wishlist.

        One add request per id, all in flight at once; a failed add does not
        stop the others. Afterwards the merged ids leave the local wishlist,
        except those whose add failed transiently when retain_failed is set,
        the server views are refetched and the user is notified once.
        """
        snapshot = self.local.ids
        if not snapshot:
            return MergeResult()

        remote = self.remote
        outcomes = await asyncio.gather(
            *(self._merge_one(remote, product_id) for product_id in snapshot),
            return_exceptions=True
        )

        result = MergeResult()
        for product_id, outcome in zip(snapshot, outcomes):
            if isinstance(outcome, BaseException):
                result.failed[product_id] = outcome
            else:
                result.succeeded.append(product_id)

        if self.retain_failed:
            result.retained = [
                product_id for product_id, error in result.failed.items() if is_transient(error)
            ]
        # Only the merged snapshot leaves the device; ids saved after a logout mid-merge stay
        self.local.discard(
            product_id for product_id in snapshot if product_id not in result.retained
        )

        await self._invalidate_remote_views()

        logger.info(
            f"Wishlist merge finished: {len(result.succeeded)} synced, "
            f"{len(result.failed)} failed, {len(result.retained)} kept for retry"
        )
        if result.ok:
            self.notifier.notify(
                "Wishlist synced",
                "Your saved items have been added to your wishlist."
            )
        else:
            description = (
                f"{len(result.failed)} of {result.total} saved items could not be synced"
            )
            if result.retained and len(result.retained) == len(result.failed):
                description += " and will be retried next time you sign in"
            elif result.retained:
                description += f"; {len(result.retained)} will be retried next time you sign in"
            self.notifier.notify("Wishlist synced", description + ".", NotificationVariant.WARNING)
        return result

    async def toggle_wishlist(self, product_id: str):
        """Add the product if absent, remove it if present, on the active store"""
        identity = self._identity
        if isinstance(identity, Anonymous):
            self._toggle_local(identity.local, product_id)
        else:
            await self._toggle_remote(identity.remote, product_id)

    def _toggle_local(self, local: LocalStore, product_id: str):
        if product_id in local:
            local.remove(product_id)
            self.notifier.notify(
                "Removed from wishlist",
                "Product has been removed from your wishlist"
            )
        else:
            local.add(product_id)
            self.notifier.notify(
                "Added to wishlist",
                "Product has been saved to your wishlist"
            )

    async def _toggle_remote(self, remote: RemoteStore, product_id: str):
        in_list = self.is_in_wishlist(product_id)
        try:
            with self._in_flight():
                if in_list:
                    await remote.remove(product_id)
                else:
                    await remote.add(product_id)
        except WishlistRequestError as e:
            self.notifier.notify(
                "Error",
                e.message or DEFAULT_ERROR_MESSAGE,
                NotificationVariant.DESTRUCTIVE
            )
            return

        await self._invalidate_remote_views()

        if in_list:
            self.notifier.notify(
                "Removed from wishlist",
                "Product has been removed from your wishlist"
            )
        else:
            self.notifier.notify(
                "Added to wishlist",
                "Product has been added to your wishlist"
            )
