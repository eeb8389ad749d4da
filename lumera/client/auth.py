"""
Client-side authentication state

Holds the access token, answers "is this session authenticated" and tells
subscribers about every change.
"""

from typing import Any, Awaitable, Callable, Dict, List, Optional
import logging

import httpx

from .errors import WishlistRequestError, extract_error_message

logger = logging.getLogger(__name__)

AuthListener = Callable[[bool], Awaitable[None]]

ME_PATH = "/api/v1/auth/me"

class AuthState:
    """Bearer-token session as seen by the client"""

    def __init__(self, http: Optional[httpx.AsyncClient] = None, token: Optional[str] = None):
        self._http = http
        self._token = token
        self.user: Optional[Dict[str, Any]] = None
        self._listeners: List[AuthListener] = []

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    def headers(self) -> Dict[str, str]:
        if not self._token:
            return {}
        return {"Authorization": f"Bearer {self._token}"}

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Register an async listener; returns a function that unregisters it"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _set_token(self, token: Optional[str]):
        was_authenticated = self.is_authenticated
        self._token = token
        if not token:
            self.user = None
        if was_authenticated != self.is_authenticated:
            logger.info(f"Auth state changed: authenticated={self.is_authenticated}")
        for listener in list(self._listeners):
            await listener(self.is_authenticated)

    async def login(self, token: str):
        await self._set_token(token)

    async def logout(self):
        await self._set_token(None)

    async def refresh(self) -> bool:
        """
        Re-check the session against the API

        A 401 drops the token. Other failures raise WishlistRequestError and
        leave the state untouched.
        """
        if not self._token:
            return False
        if self._http is None:
            return True

        try:
            response = await self._http.get(ME_PATH, headers=self.headers())
        except httpx.HTTPError as e:
            raise WishlistRequestError(None, f"Network error: {e}") from e

        if response.status_code == 401:
            logger.info("Session rejected by the API, signing out")
            await self.logout()
            return False
        if response.is_error:
            raise WishlistRequestError(response.status_code, extract_error_message(response))

        self.user = response.json()
        return True
