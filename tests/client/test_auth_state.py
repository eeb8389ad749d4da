from unittest.mock import AsyncMock, MagicMock, call

import httpx
import pytest

from lumera.client import AuthState, Notifier, NotificationVariant, WishlistRequestError


@pytest.mark.asyncio
async def test_listeners_follow_login_and_logout():
    auth = AuthState()
    listener = AsyncMock()

    unsubscribe = auth.subscribe(listener)
    await auth.login("abc")
    assert auth.is_authenticated
    assert auth.headers() == {"Authorization": "Bearer abc"}

    await auth.logout()
    assert not auth.is_authenticated
    assert auth.headers() == {}

    unsubscribe()
    await auth.login("def")
    assert listener.await_args_list == [call(True), call(False)]


@pytest.mark.asyncio
async def test_refresh_loads_current_user():
    def handler(request):
        assert request.headers["Authorization"] == "Bearer abc"
        return httpx.Response(200, json={"id": "u1", "name": "Ines"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://api.test") as http:
        auth = AuthState(http, token="abc")
        assert await auth.refresh() is True

    assert auth.user == {"id": "u1", "name": "Ines"}


@pytest.mark.asyncio
async def test_rejected_session_signs_out():
    def handler(request):
        return httpx.Response(401, json={"error": {"code": "UNAUTHORIZED", "message": "Not authenticated"}})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://api.test") as http:
        auth = AuthState(http, token="expired")
        seen = []

        async def listener(authenticated):
            seen.append(authenticated)

        auth.subscribe(listener)
        assert await auth.refresh() is False

    assert not auth.is_authenticated
    assert seen == [False]


@pytest.mark.asyncio
async def test_server_error_keeps_session():
    def handler(request):
        return httpx.Response(500, json={"error": {"code": "INTERNAL_ERROR", "message": "Internal server error"}})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://api.test") as http:
        auth = AuthState(http, token="abc")
        with pytest.raises(WishlistRequestError):
            await auth.refresh()

    assert auth.is_authenticated


def test_notifier_keeps_bounded_history():
    notifier = Notifier(history_size=2)
    listener = MagicMock()
    notifier.subscribe(listener)

    notifier.notify("Added to wishlist", "one")
    notifier.notify("Added to wishlist", "two")
    last = notifier.notify("Error", "three", NotificationVariant.DESTRUCTIVE)

    assert [n.description for n in notifier.history] == ["two", "three"]
    assert listener.call_count == 3
    listener.assert_called_with(last)
    assert last.variant == NotificationVariant.DESTRUCTIVE
