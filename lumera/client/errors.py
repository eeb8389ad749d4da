"""Client-side wishlist errors"""

from typing import Optional

import httpx

DEFAULT_ERROR_MESSAGE = "Failed to update wishlist"

class WishlistError(Exception):
    """Base class for wishlist client errors"""

class WishlistRequestError(WishlistError):
    """A wishlist API call failed (non-success status or transport error)"""

    def __init__(self, status_code: Optional[int], message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    def __repr__(self) -> str:
        return f"WishlistRequestError(status_code={self.status_code!r}, message={self.message!r})"

def extract_error_message(response: httpx.Response) -> str:
    """Human-readable message carried by an error response"""
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
        detail = body.get("detail")
        if isinstance(detail, str) and detail:
            return detail

    text = response.text.strip()
    return text or f"Request failed with status {response.status_code}"
