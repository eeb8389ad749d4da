"""Server-side wishlist store reached over the HTTP API"""

from typing import Any, List
from urllib.parse import quote
import logging

import httpx

from .auth import AuthState
from .errors import WishlistRequestError, extract_error_message

logger = logging.getLogger(__name__)

WISHLIST_PATH = "/api/v1/wishlist"

class RemoteStore:
    """Thin async wrapper over the wishlist endpoints"""

    def __init__(self, http: httpx.AsyncClient, auth: AuthState):
        self.http = http
        self.auth = auth

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self.http.request(method, url, headers=self.auth.headers(), **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise WishlistRequestError(None, f"Network error: {e}") from e

        if response.is_error:
            message = extract_error_message(response)
            logger.warning(f"{method} {url} -> {response.status_code}: {message}")
            raise WishlistRequestError(response.status_code, message)
        return response

    async def list_product_ids(self) -> List[str]:
        response = await self._request("GET", f"{WISHLIST_PATH}/product-ids")
        return [str(product_id) for product_id in response.json()]

    async def add(self, product_id: str) -> dict:
        response = await self._request("POST", WISHLIST_PATH, json={"productId": product_id})
        return response.json()

    async def remove(self, product_id: str) -> dict:
        response = await self._request("DELETE", f"{WISHLIST_PATH}/{quote(product_id, safe='')}")
        return response.json()

    async def is_in_wishlist(self, product_id: str) -> bool:
        response = await self._request("GET", f"{WISHLIST_PATH}/check/{quote(product_id, safe='')}")
        return bool(response.json().get("isInWishlist"))
